"""
Persisted representation of items and learning configuration.

The interval unit is written next to the interval and checked against the
state on load, so a record can never be read back with the wrong unit.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from cadence.domain.constants import DEFAULT_EASE
from cadence.domain.models import CardState, IntervalUnit, Item, LearningConfig

STORE_FORMAT_VERSION = 1


class ItemRecord(BaseModel):
    id: str
    front: str
    back: str
    state: CardState = CardState.NEW
    current_step: int = Field(default=0, ge=0)
    interval: float = Field(default=0.0, ge=0)
    interval_unit: IntervalUnit | None = None
    ease: float = DEFAULT_EASE
    lapses: int = Field(default=0, ge=0)
    review_count: int = Field(default=0, ge=0)
    next_review_date: datetime
    created_at: datetime
    last_reviewed_at: datetime | None = None

    @model_validator(mode="after")
    def check_interval_unit(self) -> "ItemRecord":
        expected = IntervalUnit.DAYS if self.state == CardState.REVIEW else IntervalUnit.MINUTES
        if self.interval_unit is None:
            self.interval_unit = expected
        elif self.interval_unit != expected:
            raise ValueError(
                f"interval unit {self.interval_unit.value!r} does not match "
                f"state {self.state.value!r} (expected {expected.value!r})"
            )
        return self

    @classmethod
    def from_item(cls, item: Item) -> "ItemRecord":
        return cls(
            id=item.id,
            front=item.front,
            back=item.back,
            state=item.state,
            current_step=item.current_step,
            interval=item.interval,
            interval_unit=item.interval_unit,
            ease=item.ease,
            lapses=item.lapses,
            review_count=item.review_count,
            next_review_date=item.next_review_date,
            created_at=item.created_at,
            last_reviewed_at=item.last_reviewed_at,
        )

    def to_item(self) -> Item:
        return Item(
            id=self.id,
            front=self.front,
            back=self.back,
            state=self.state,
            current_step=self.current_step,
            interval=self.interval,
            ease=self.ease,
            lapses=self.lapses,
            review_count=self.review_count,
            next_review_date=self.next_review_date,
            created_at=self.created_at,
            last_reviewed_at=self.last_reviewed_at,
        )


class LearningConfigRecord(BaseModel):
    learning_steps: list[float]
    relearning_steps: list[float]
    graduating_interval: float
    easy_interval: float
    new_cards_per_day: int

    @classmethod
    def from_config(cls, config: LearningConfig) -> "LearningConfigRecord":
        return cls(
            learning_steps=list(config.learning_steps),
            relearning_steps=list(config.relearning_steps),
            graduating_interval=config.graduating_interval,
            easy_interval=config.easy_interval,
            new_cards_per_day=config.new_cards_per_day,
        )

    def to_config(self) -> LearningConfig:
        """Raises InvalidConfig if the stored values cannot drive the scheduler."""
        return LearningConfig(
            learning_steps=tuple(self.learning_steps),
            relearning_steps=tuple(self.relearning_steps),
            graduating_interval=self.graduating_interval,
            easy_interval=self.easy_interval,
            new_cards_per_day=self.new_cards_per_day,
        )


class StoreDocument(BaseModel):
    """Top-level JSON document written by JsonItemRepository."""

    version: int = STORE_FORMAT_VERSION
    items: list[ItemRecord] = Field(default_factory=list)
    # Kept raw so a bad config falls back to defaults without losing the items.
    config: dict[str, Any] | None = None
