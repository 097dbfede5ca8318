"""Database connection and migrations."""

from .connection import db_manager, get_db_context

__all__ = ["db_manager", "get_db_context"]
