"""
Item state machine.

    New --again/hard/good--> Learning --good (last step)/easy--> Review
    New --easy-------------------------------------------------> Review
    Review --again--> Relearning --hard/good/easy--> Review

New is never re-entered. All arithmetic is delegated to the interval
calculator; this module only maps an Item onto it and back.
"""

import logging
from dataclasses import replace
from datetime import datetime

from cadence.domain.models import Grade, Item, LearningConfig

from .interval_calculator import schedule

logger = logging.getLogger(__name__)


class ItemStateMachine:
    """
    Applies grades to items.

    Stateless: the learning configuration is supplied on every call and the
    caller is responsible for persisting the returned item.
    """

    def grade(
        self,
        item: Item,
        difficulty: Grade | str,
        config: LearningConfig,
        now: datetime,
    ) -> Item:
        """
        Return a copy of `item` rescheduled for `difficulty`.

        Raises:
            InvalidGrade: If `difficulty` is not again, hard, good or easy.
                The item is left untouched.
        """
        grade_value = Grade.parse(difficulty)

        result = schedule(
            state=item.state,
            current_step=item.current_step,
            interval=item.interval,
            ease=item.ease,
            lapses=item.lapses,
            review_count=item.review_count,
            grade=grade_value,
            config=config,
            now=now,
        )

        updated = replace(
            item,
            state=result.state,
            current_step=result.current_step,
            interval=result.interval,
            ease=result.ease,
            lapses=result.lapses,
            review_count=result.review_count,
            next_review_date=result.next_review_date,
            last_reviewed_at=now,
        )
        logger.debug(
            f"Graded {item.id} {grade_value.value}: {item.state.value} -> {updated.state.value}, "
            f"interval {updated.interval:g} {updated.interval_unit.value}"
        )
        return updated


_default_machine = ItemStateMachine()


def grade(item: Item, difficulty: Grade | str, config: LearningConfig, now: datetime) -> Item:
    """Module-level shortcut for ItemStateMachine().grade."""
    return _default_machine.grade(item, difficulty, config, now)
