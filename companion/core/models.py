"""
Core DB models: user profiles.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, JSON

from companion.core.db import Base


def _utc_now() -> datetime:
    """UTC now as naive datetime for DateTime(timezone=False) columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """Profile of a companion user. location is free text ("City, Country")."""
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, nullable=True)
    location = Column(String(255), nullable=True)
    preferences = Column(JSON, nullable=True)  # e.g. {"language": "en", "theme": "light"}
    created_at = Column(DateTime(timezone=False), default=_utc_now, nullable=False)
