"""
CoachPersona SQLModel for FitCoach

The user's configured coach: name, style, tone and reply language.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import Field, SQLModel

from fitcoach.infrastructure.db.models.base import timestamp_column, utcnow


DEFAULT_COACH_NAME = "Coach"
DEFAULT_COACH_STYLE = "supportive"
DEFAULT_COACH_TONE = "energetic"
DEFAULT_COACH_LANGUAGE = "English"


class CoachPersonaModel(SQLModel, table=True):
    __tablename__ = "coach_personas"

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
    )

    name: str = Field(default=DEFAULT_COACH_NAME, max_length=100)
    style: str = Field(default=DEFAULT_COACH_STYLE, max_length=30)
    tone: str = Field(default=DEFAULT_COACH_TONE, max_length=30)
    language: str = Field(default=DEFAULT_COACH_LANGUAGE, max_length=50)

    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
