"""
Chat Domain Models for FitCoach

Pure Python/Pydantic models for chat entities.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Literal

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_THREAD_TITLE = "New Chat"


class MessageRole(str, Enum):
    """Role of the message sender."""
    USER = "user"
    ASSISTANT = "assistant"


class RelayState(str, Enum):
    """Lifecycle of a single streamed chat turn."""
    IDLE = "idle"
    USER_MESSAGE_PERSISTED = "user_message_persisted"
    CONTEXT_BUILT = "context_built"
    STREAMING = "streaming"
    COMPLETING = "completing"
    DONE = "done"
    ABORTED = "aborted"


class ChatThreadCreate(BaseModel):
    """Schema for creating a new chat thread."""
    title: Optional[str] = Field(None, max_length=255)


class ChatThread(BaseModel):
    """Complete chat thread entity."""
    id: int
    user_id: int
    title: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatMessage(BaseModel):
    """Complete chat message entity."""
    id: int
    thread_id: int
    role: MessageRole
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatStreamRequest(BaseModel):
    """
    Body of a streaming chat turn.

    Fields are optional at the schema level so that missing values are
    reported as a ValidationError by the relay rather than a 422.
    """
    thread_id: Optional[int] = Field(None, alias="threadId")
    message: Optional[str] = None
    language: Optional[Literal["en", "ar"]] = None

    model_config = ConfigDict(populate_by_name=True)
