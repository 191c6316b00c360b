# Application Session Package
from .poller import DueCheckPoller
from .prioritizer import apply_new_limit, breakdown, prioritize, tier_of
from .review_session import ReviewSession

__all__ = [
    "DueCheckPoller",
    "ReviewSession",
    "apply_new_limit",
    "breakdown",
    "prioritize",
    "tier_of",
]
