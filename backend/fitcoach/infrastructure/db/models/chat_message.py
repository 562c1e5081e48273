"""
ChatMessage SQLModel for FitCoach

Database model for chat messages. Messages are immutable once written.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text
from sqlmodel import Field, SQLModel

from fitcoach.infrastructure.db.models.base import timestamp_column, utcnow


class ChatMessage(SQLModel, table=True):
    """
    ChatMessage database table model.

    Conversation order is (created_at, id).
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_thread_created", "thread_id", "created_at"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    # Foreign key to chat_threads
    thread_id: int = Field(
        ...,
        sa_column=Column(
            "thread_id",
            Integer,
            ForeignKey("chat_threads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        description="Reference to parent thread"
    )

    role: str = Field(
        ...,
        sa_column=Column(String(20), nullable=False),
        description="Message role: 'user' or 'assistant'"
    )

    content: str = Field(
        ...,
        sa_column=Column(Text, nullable=False),
        description="Message content"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="Message timestamp"
    )
