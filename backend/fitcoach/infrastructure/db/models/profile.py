"""
Profile SQLModel for FitCoach

Body metrics and training preferences, one row per user.
Enum-valued columns are stored as plain strings and validated
by the domain models on the way in.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlmodel import Field, SQLModel

from fitcoach.infrastructure.db.models.base import timestamp_column, utcnow


class UserProfile(SQLModel, table=True):
    """
    UserProfile database table model.
    """

    __tablename__ = "profiles"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(
        ...,
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            index=True,
            nullable=False,
        ),
        description="Owning user"
    )

    age: Optional[int] = Field(default=None)
    gender: Optional[str] = Field(default=None, max_length=20)
    height: Optional[float] = Field(default=None, description="cm")
    weight: Optional[float] = Field(default=None, description="kg")
    goal: Optional[str] = Field(default=None, max_length=30)
    experience_level: Optional[str] = Field(default=None, max_length=30)
    activity_level: Optional[str] = Field(default=None, max_length=30)
    days_per_week: Optional[int] = Field(default=None)
    session_length: Optional[int] = Field(default=None, description="minutes")
    equipment: Optional[str] = Field(default=None, max_length=30)
    injuries: Optional[str] = Field(default=None, sa_column=Column(Text))
    allergies: Optional[str] = Field(default=None, sa_column=Column(Text))

    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
