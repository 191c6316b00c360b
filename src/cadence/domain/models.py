"""
Domain models for the scheduling engine.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from .constants import (
    DEFAULT_EASE,
    DEFAULT_EASY_INTERVAL,
    DEFAULT_GRADUATING_INTERVAL,
    DEFAULT_LEARNING_STEPS,
    DEFAULT_NEW_CARDS_PER_DAY,
    DEFAULT_RELEARNING_STEPS,
    MIN_REVIEW_INTERVAL_DAYS,
)
from .exceptions import InvalidConfig, InvalidGrade


class Grade(str, Enum):
    """User feedback on recall quality."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value: "Grade | str") -> "Grade":
        """Coerce a grade name into a Grade, raising InvalidGrade otherwise."""
        if isinstance(value, Grade):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidGrade(value)


class CardState(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


class IntervalUnit(str, Enum):
    MINUTES = "minutes"
    DAYS = "days"


class SessionMode(str, Enum):
    DUE = "due"  # only currently-due items
    ALL = "all"  # every item, due items still first


@dataclass(frozen=True)
class LearningConfig:
    """
    Scheduling parameters shared by every item.

    Attributes:
        learning_steps: Minute-denominated ladder for new items.
        relearning_steps: Minute-denominated ladder for lapsed reviews.
        graduating_interval: Days granted when "good" finishes the ladder (at least 1).
        easy_interval: Days granted when "easy" skips the ladder (at least 1).
        new_cards_per_day: Advisory cap on new items per session.
    """

    learning_steps: tuple[float, ...] = DEFAULT_LEARNING_STEPS
    relearning_steps: tuple[float, ...] = DEFAULT_RELEARNING_STEPS
    graduating_interval: float = DEFAULT_GRADUATING_INTERVAL
    easy_interval: float = DEFAULT_EASY_INTERVAL
    new_cards_per_day: int = DEFAULT_NEW_CARDS_PER_DAY

    def __post_init__(self):
        object.__setattr__(
            self, "learning_steps", _validate_steps("learning_steps", self.learning_steps)
        )
        object.__setattr__(
            self, "relearning_steps", _validate_steps("relearning_steps", self.relearning_steps)
        )
        for name in ("graduating_interval", "easy_interval"):
            if getattr(self, name) < MIN_REVIEW_INTERVAL_DAYS:
                raise InvalidConfig(f"{name} must be at least {MIN_REVIEW_INTERVAL_DAYS:g} day")
        if self.new_cards_per_day < 0:
            raise InvalidConfig("new_cards_per_day must not be negative")


def _validate_steps(name: str, steps) -> tuple[float, ...]:
    try:
        normalized = tuple(float(s) for s in steps)
    except (TypeError, ValueError) as e:
        raise InvalidConfig(f"{name} must be a sequence of numbers: {e}") from e
    if not normalized:
        raise InvalidConfig(f"{name} must not be empty")
    if any(s <= 0 for s in normalized):
        raise InvalidConfig(f"{name} must only contain positive durations")
    return normalized


@dataclass(frozen=True)
class Item:
    """
    A reviewable unit.

    `interval` is minutes while the item is new, learning or relearning, and
    days while it is in review. Use `interval_unit` / `interval_delta` rather
    than reading the raw number on its own.
    """

    id: str
    front: str
    back: str
    created_at: datetime
    next_review_date: datetime
    state: CardState = CardState.NEW
    current_step: int = 0
    interval: float = 0.0
    ease: float = DEFAULT_EASE
    lapses: int = 0
    review_count: int = 0
    last_reviewed_at: datetime | None = None

    @property
    def interval_unit(self) -> IntervalUnit:
        return IntervalUnit.DAYS if self.state == CardState.REVIEW else IntervalUnit.MINUTES

    @property
    def interval_delta(self) -> timedelta:
        if self.interval_unit == IntervalUnit.DAYS:
            return timedelta(days=self.interval)
        return timedelta(minutes=self.interval)

    def is_due(self, now: datetime) -> bool:
        return self.next_review_date <= now


@dataclass(frozen=True)
class ScheduleResult:
    """Output of the interval calculator for a single grading event."""

    state: CardState
    current_step: int
    interval: float
    ease: float
    lapses: int
    next_review_date: datetime
    review_count: int


@dataclass
class TierBreakdown:
    """Per-tier counts of a prioritized queue."""

    urgent_due: int = 0
    regular_due: int = 0
    new: int = 0
    future: int = 0

    @property
    def total(self) -> int:
        return self.urgent_due + self.regular_due + self.new + self.future
