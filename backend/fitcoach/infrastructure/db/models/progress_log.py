"""
ProgressLog SQLModel for FitCoach

Body-weight and body-composition check-ins.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import JSON, Column, ForeignKey, Integer, Text
from sqlmodel import Field, SQLModel

from fitcoach.infrastructure.db.models.base import timestamp_column, utcnow


class ProgressLogModel(SQLModel, table=True):
    __tablename__ = "progress_logs"

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

    date: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    weight: Optional[float] = Field(default=None, description="kg")
    body_fat: Optional[float] = Field(default=None, description="percent")
    measurements: Optional[Dict[str, float]] = Field(default=None, sa_column=Column(JSON))
    photos: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
