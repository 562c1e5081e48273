"""
ChatThread SQLModel for FitCoach

Database model for coaching conversations.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, ForeignKey, Index, Integer, String
from sqlmodel import Field, SQLModel

from fitcoach.domain.chat import DEFAULT_THREAD_TITLE
from fitcoach.infrastructure.db.models.base import timestamp_column, utcnow


class ChatThread(SQLModel, table=True):
    """
    ChatThread database table model.

    Stores conversation threads for users. updated_at moves forward
    every time a message is appended.
    """

    __tablename__ = "chat_threads"
    __table_args__ = (
        Index("ix_chat_threads_user_updated", "user_id", "updated_at"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(
        ...,
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        description="Owning user"
    )

    title: str = Field(
        default=DEFAULT_THREAD_TITLE,
        sa_column=Column(String(255), nullable=False),
        description="Auto-generated from first message"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="Thread creation timestamp"
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="Last message timestamp"
    )
