"""
Domain models for collection statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StateBreakdown:
    """Number of items in each lifecycle state."""

    new: int = 0
    learning: int = 0
    review: int = 0
    relearning: int = 0


@dataclass(frozen=True)
class StudyStats:
    """
    Point-in-time projection over the whole collection.

    Attributes:
        total_cards: Collection size.
        due_today: Items whose next review date has passed.
        reviewed_today: Items graded on the current calendar day.
        mastery_percentage: Share of items in review state, rounded (0-100).
        current_streak: Reserved; always 0 until a review log exists.
        states: Item counts per state across the collection.
        due_states: Item counts per state among due items.
    """

    total_cards: int
    due_today: int
    reviewed_today: int
    mastery_percentage: int
    current_streak: int = 0
    states: StateBreakdown = field(default_factory=StateBreakdown)
    due_states: StateBreakdown = field(default_factory=StateBreakdown)
