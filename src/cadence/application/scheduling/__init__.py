# Application Scheduling Package
from .interval_calculator import schedule, sm2_review
from .state_machine import ItemStateMachine, grade

__all__ = ["schedule", "sm2_review", "ItemStateMachine", "grade"]
