"""
Session queue ordering.

Items are partitioned into four tiers, concatenated in this order:

1. Due learning/relearning items ("urgent due")
2. Due review/new items ("regular due")
3. New items that are not due yet
4. Everything else that is not due (future reviews)

Within a tier items are ordered by next review date, then id, so the
result does not depend on the iteration order of the store.
"""

from collections.abc import Iterable
from datetime import datetime

from cadence.domain.models import CardState, Item, TierBreakdown

URGENT_DUE = 1
REGULAR_DUE = 2
NEW_NOT_DUE = 3
FUTURE = 4

_STEPPED_STATES = (CardState.LEARNING, CardState.RELEARNING)


def tier_of(item: Item, now: datetime) -> int:
    if item.is_due(now):
        return URGENT_DUE if item.state in _STEPPED_STATES else REGULAR_DUE
    return NEW_NOT_DUE if item.state == CardState.NEW else FUTURE


def prioritize(items: Iterable[Item], now: datetime) -> list[Item]:
    """Return a new list ordered by tier, then next review date, then id."""
    return sorted(items, key=lambda item: (tier_of(item, now), item.next_review_date, item.id))


def breakdown(items: Iterable[Item], now: datetime) -> TierBreakdown:
    result = TierBreakdown()
    for item in items:
        tier = tier_of(item, now)
        if tier == URGENT_DUE:
            result.urgent_due += 1
        elif tier == REGULAR_DUE:
            result.regular_due += 1
        elif tier == NEW_NOT_DUE:
            result.new += 1
        else:
            result.future += 1
    return result


def apply_new_limit(items: list[Item], limit: int | None) -> list[Item]:
    """
    Drop new items beyond the first `limit`, keeping everything else in place.

    A limit of None disables the cap.
    """
    if limit is None:
        return list(items)

    kept: list[Item] = []
    new_seen = 0
    for item in items:
        if item.state == CardState.NEW:
            if new_seen >= limit:
                continue
            new_seen += 1
        kept.append(item)
    return kept
