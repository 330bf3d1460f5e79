"""SQLAlchemy models for IskolarLink trackers."""

from .tracker_history import HistoryAction, TrackerHistory
from .tracker_program import PROGRAM_CONFIGS, ProgramConfig, TrackerProgram, get_program_config
from .tracker_record import MAX_AMOUNT, TrackerRecord
from .user import ROLE_ADMIN, ROLE_SCHOLAR, User

__all__ = [
    "HistoryAction",
    "MAX_AMOUNT",
    "PROGRAM_CONFIGS",
    "ProgramConfig",
    "ROLE_ADMIN",
    "ROLE_SCHOLAR",
    "TrackerHistory",
    "TrackerProgram",
    "TrackerRecord",
    "User",
    "get_program_config",
]
