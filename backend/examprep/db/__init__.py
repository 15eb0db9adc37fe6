"""Database package."""

from examprep.db.base import engine, async_session_maker, Base, get_db, init_db, close_db

__all__ = ["engine", "async_session_maker", "Base", "get_db", "init_db", "close_db"]
