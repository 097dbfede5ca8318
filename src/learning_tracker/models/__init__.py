"""Database models for Learning Tracker."""

from .base import Base
from .progress_log import ProgressLog

__all__ = [
    "Base",
    "ProgressLog",
]
