"""Database package — shared engine and session factory."""

from stageplan.db.base import Base, close_db, get_db_session, get_session_factory, init_db

__all__ = [
    "Base",
    "close_db",
    "get_db_session",
    "get_session_factory",
    "init_db",
]
