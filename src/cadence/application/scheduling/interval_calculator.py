"""
Interval calculator: learning-step ladder plus SM-2 review intervals.

This is a pure computation module with no I/O. Intervals are minutes while
an item is new, learning or relearning, and days once it is in review.
"""

from dataclasses import replace
from datetime import datetime, timedelta

from cadence.domain.constants import (
    EASY_EASE_BONUS,
    EASY_INTERVAL_FACTOR,
    HARD_EASE_PENALTY,
    HARD_INTERVAL_FACTOR,
    LAPSE_EASE_PENALTY,
    MAX_LEARNING_EASE,
    MIN_EASE,
    MIN_REVIEW_INTERVAL_DAYS,
)
from cadence.domain.models import CardState, Grade, LearningConfig, ScheduleResult


def sm2_review(interval: float, ease: float, grade: Grade) -> tuple[float, float]:
    """
    SM-2 interval update for a passing review.

    Args:
        interval: Current interval (days).
        ease: Current ease factor.
        grade: hard, good or easy. "again" leaves both values untouched
            apart from the 1-day floor; lapses are handled by `schedule`.

    Returns:
        (new_interval_days, new_ease)
    """
    new_interval = interval
    new_ease = ease

    if grade == Grade.HARD:
        new_interval = max(MIN_REVIEW_INTERVAL_DAYS, interval * HARD_INTERVAL_FACTOR)
        new_ease = max(MIN_EASE, ease - HARD_EASE_PENALTY)
    elif grade == Grade.GOOD:
        new_interval = interval * ease
    elif grade == Grade.EASY:
        new_interval = interval * ease * EASY_INTERVAL_FACTOR
        new_ease = ease + EASY_EASE_BONUS

    return max(MIN_REVIEW_INTERVAL_DAYS, new_interval), new_ease


def schedule(
    state: CardState,
    current_step: int,
    interval: float,
    ease: float,
    lapses: int,
    review_count: int,
    grade: Grade,
    config: LearningConfig,
    now: datetime,
) -> ScheduleResult:
    """
    Compute the next scheduling state for one grading event.

    Total over every well-formed state/config pair; never raises.
    """
    if state in (CardState.NEW, CardState.LEARNING):
        result = _schedule_learning(current_step, ease, lapses, grade, config, now)
    else:
        result = _schedule_review(interval, ease, lapses, grade, config, now)

    return replace(result, review_count=review_count + 1)


def _schedule_learning(
    current_step: int,
    ease: float,
    lapses: int,
    grade: Grade,
    config: LearningConfig,
    now: datetime,
) -> ScheduleResult:
    steps = config.learning_steps

    if grade == Grade.AGAIN:
        return _stepped(CardState.LEARNING, 0, steps[0], ease, lapses, now)

    if grade == Grade.HARD:
        step = min(max(0, current_step), len(steps) - 1)
        return _stepped(CardState.LEARNING, step, steps[step], ease, lapses, now)

    if grade == Grade.GOOD:
        next_step = current_step + 1
        if next_step >= len(steps):
            return _graduated(config.graduating_interval, ease, lapses, now)
        return _stepped(CardState.LEARNING, next_step, steps[next_step], ease, lapses, now)

    # easy skips whatever is left of the ladder
    return _graduated(
        config.easy_interval,
        min(ease + EASY_EASE_BONUS, MAX_LEARNING_EASE),
        lapses,
        now,
    )


def _schedule_review(
    interval: float,
    ease: float,
    lapses: int,
    grade: Grade,
    config: LearningConfig,
    now: datetime,
) -> ScheduleResult:
    if grade == Grade.AGAIN:
        return _stepped(
            CardState.RELEARNING,
            0,
            config.relearning_steps[0],
            max(MIN_EASE, ease - LAPSE_EASE_PENALTY),
            lapses + 1,
            now,
        )

    new_interval, new_ease = sm2_review(interval, ease, grade)
    return _graduated(new_interval, new_ease, lapses, now)


def _stepped(
    state: CardState, step: int, minutes: float, ease: float, lapses: int, now: datetime
) -> ScheduleResult:
    return ScheduleResult(
        state=state,
        current_step=step,
        interval=minutes,
        ease=ease,
        lapses=lapses,
        next_review_date=now + timedelta(minutes=minutes),
        review_count=0,
    )


def _graduated(days: float, ease: float, lapses: int, now: datetime) -> ScheduleResult:
    return ScheduleResult(
        state=CardState.REVIEW,
        current_step=0,
        interval=days,
        ease=ease,
        lapses=lapses,
        next_review_date=now + timedelta(days=days),
        review_count=0,
    )
