"""
WorkoutSession SQLModel for FitCoach

Completed workouts logged by the user.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, ForeignKey, Integer, Text
from sqlmodel import Field, SQLModel

from fitcoach.infrastructure.db.models.base import timestamp_column, utcnow


class WorkoutSessionModel(SQLModel, table=True):
    __tablename__ = "workout_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        ...,
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            index=True,
            nullable=False,
        ),
    )

    name: str = Field(..., max_length=200)
    date: datetime = Field(default_factory=utcnow, sa_column=timestamp_column(), description="When the workout happened")
    duration: Optional[int] = Field(default=None, description="minutes")
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    exercises: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        sa_column=Column(JSON),
        description="Exercises with sets/reps as logged by the client"
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
