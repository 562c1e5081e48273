"""
User SQLModel for FitCoach

Account record; owns every other per-user table.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, String
from sqlmodel import Field, SQLModel

from fitcoach.infrastructure.db.models.base import timestamp_column, utcnow


class User(SQLModel, table=True):
    """
    User database table model.

    Stores login credentials; the password is kept as an argon2 hash.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)

    username: str = Field(
        ...,
        sa_column=Column(String(50), unique=True, index=True, nullable=False),
        description="Unique login name"
    )
    email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), unique=True, nullable=True),
    )
    password_hash: str = Field(
        ...,
        sa_column=Column(String(255), nullable=False),
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
