"""
Shared helpers for SQLModel ORM models.

Timestamps are stored as naive UTC so that Postgres
TIMESTAMP WITHOUT TIME ZONE and SQLite round-trip identically.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utcnow() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def timestamp_column() -> Column:
    """
    Explicit TIMESTAMP WITHOUT TIME ZONE column.

    Newer SQLModel releases map bare ``datetime`` fields to a
    timezone-aware type that rejects naive values, so every timestamp
    field declares its column through here.
    """
    return Column(DateTime(timezone=False), nullable=False)
