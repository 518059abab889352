"""
Base models and common types for SQLAlchemy ORM
"""
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    pass


def utcnow() -> datetime:
    """Timezone-aware wall clock with microseconds, used for row timestamps."""
    return datetime.now(timezone.utc)
