"""
Database module - connection for the active deployment profile.
"""
from immigration_tracker.db.database import get_db, get_db_session, test_database_connection

__all__ = [
    "get_db",
    "get_db_session",
    "test_database_connection"
]
