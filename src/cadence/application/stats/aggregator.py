"""
Stats aggregator for deriving collection-level numbers from items.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from datetime import datetime

from cadence.domain.models import CardState, Item
from cadence.domain.stats.models import StateBreakdown, StudyStats


class StatsAggregator:
    """
    Computes StudyStats from a snapshot of the collection.

    Stateless and side-effect free.
    """

    def compute(self, items: Iterable[Item], now: datetime) -> StudyStats:
        items = list(items)
        total = len(items)
        due = [item for item in items if item.is_due(now)]
        mastered = sum(1 for item in items if item.state == CardState.REVIEW)

        return StudyStats(
            total_cards=total,
            due_today=len(due),
            reviewed_today=sum(1 for item in items if self._reviewed_today(item, now)),
            mastery_percentage=self._mastery(mastered, total),
            current_streak=0,
            states=self._breakdown(items),
            due_states=self._breakdown(due),
        )

    def _reviewed_today(self, item: Item, now: datetime) -> bool:
        """
        True if the item was graded on the calendar day of `now`.

        Records written before last_reviewed_at existed fall back to using the
        next review date as a proxy for "touched today".
        """
        today = now.date()
        if item.last_reviewed_at is not None:
            return item.last_reviewed_at.astimezone(now.tzinfo).date() == today
        if item.review_count == 0:
            return False
        return item.next_review_date.astimezone(now.tzinfo).date() == today

    def _mastery(self, mastered: int, total: int) -> int:
        if total == 0:
            return 0
        return round(100 * mastered / total)

    def _breakdown(self, items: list[Item]) -> StateBreakdown:
        counts = {state: 0 for state in CardState}
        for item in items:
            counts[item.state] += 1
        return StateBreakdown(
            new=counts[CardState.NEW],
            learning=counts[CardState.LEARNING],
            review=counts[CardState.REVIEW],
            relearning=counts[CardState.RELEARNING],
        )
