# Domain Stats Package
from .models import StateBreakdown, StudyStats

__all__ = ["StudyStats", "StateBreakdown"]
