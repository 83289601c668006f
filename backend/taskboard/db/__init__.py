"""Database package."""

from taskboard.db.base import Base, BaseModel
from taskboard.db.session import DBSession, get_db_session

__all__ = ["Base", "BaseModel", "DBSession", "get_db_session"]
