"""
Persistence layer for squash scheduling data.
No business logic, no scheduling — only read/write interfaces.
"""
from .db import get_connection, get_db_path, init_db, set_db_path
from .repositories import (
    UserRepository,
    PlayerRepository,
    ScheduleRepository,
    ScheduleMatchRepository,
)

__all__ = [
    "get_connection",
    "get_db_path",
    "init_db",
    "set_db_path",
    "UserRepository",
    "PlayerRepository",
    "ScheduleRepository",
    "ScheduleMatchRepository",
]
