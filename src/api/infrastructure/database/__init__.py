"""Database infrastructure - shared engine, sessions and declarative base."""

from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
]
