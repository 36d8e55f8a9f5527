"""Declarative base and shared column helpers."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    # Naive UTC: SQLite hands datetimes back without tzinfo.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_valid_id(value: object) -> bool:
    """Return True if value is a well-formed entity identifier."""
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True
