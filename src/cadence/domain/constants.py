"""Centralized constants for the cadence engine.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Ease ----------
DEFAULT_EASE = 2.5
MIN_EASE = 1.3
MAX_LEARNING_EASE = 5.0  # cap for the easy bonus granted while learning
EASY_EASE_BONUS = 0.15
HARD_EASE_PENALTY = 0.15
LAPSE_EASE_PENALTY = 0.2

# ---------- SM-2 multipliers ----------
HARD_INTERVAL_FACTOR = 1.2
EASY_INTERVAL_FACTOR = 1.3
MIN_REVIEW_INTERVAL_DAYS = 1.0

# ---------- Learning config defaults ----------
DEFAULT_LEARNING_STEPS = (1.0, 10.0, 30.0)  # minutes
DEFAULT_RELEARNING_STEPS = (10.0,)  # minutes
DEFAULT_GRADUATING_INTERVAL = 1.0  # days
DEFAULT_EASY_INTERVAL = 4.0  # days
DEFAULT_NEW_CARDS_PER_DAY = 20

# ---------- Session ----------
DEFAULT_POLL_INTERVAL = 30.0  # seconds

# ---------- Identifiers ----------
ITEM_ID_PREFIX = "item_"
