"""
Service layer: schedule generation and the saved-schedule workflow around it.
scheduling is pure; schedule_service orchestrates persistence.
"""
from .scheduling import BYE, InvalidArgumentError, generate_schedule
from .schedule_service import (
    ScheduleService,
    ScheduleValidationError,
    ScheduleNotFoundError,
    NotScheduleOwnerError,
)

__all__ = [
    "BYE",
    "InvalidArgumentError",
    "generate_schedule",
    "ScheduleService",
    "ScheduleValidationError",
    "ScheduleNotFoundError",
    "NotScheduleOwnerError",
]
