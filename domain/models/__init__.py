"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    UTCDateTime,
    create_db_engine,
    create_session_factory,
    init_database,
)
from domain.models.user import User
from domain.models.meal import Meal

__all__ = [
    # Database
    "Base",
    "UTCDateTime",
    "create_db_engine",
    "create_session_factory",
    "init_database",
    # Models
    "User",
    "Meal",
]
