"""
Chat Service for FitCoach

Business logic layer for chat threads and messages (the conversation store).
Owns ownership checks, auto-titling and mapping of database failures
to PersistenceError.
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.domain.chat import DEFAULT_THREAD_TITLE, MessageRole
from fitcoach.infrastructure.db.models.chat_message import ChatMessage
from fitcoach.infrastructure.db.models.chat_thread import ChatThread
from fitcoach.infrastructure.db.repositories.chat_repository import ChatRepository
from fitcoach.infrastructure.exceptions import (
    ForbiddenError,
    NotFoundError,
    PersistenceError,
)


logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str, table: str):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Chat store {operation} on {table} failed: {e}")
        raise PersistenceError(
            f"Failed to {operation} {table}",
            operation=operation,
            table=table,
            original_error=e,
        )


class ChatService:
    """
    Service for chat business logic.

    Implements:
    - Ownership checks for every thread access
    - Auto-generated titles from the first user message
    - Recent-window reads for the streaming relay
    """

    TITLE_MAX_LENGTH = 50

    def __init__(self, session: AsyncSession):
        self._repository = ChatRepository(session)
        self._session = session

    # =========================================================================
    # Thread Operations
    # =========================================================================

    async def list_threads(self, user_id: int) -> List[ChatThread]:
        """
        Get all threads for a user, most recently updated first.
        """
        with _store_errors("select", "chat_threads"):
            return await self._repository.get_user_threads(user_id)

    async def get_thread_for_user(self, thread_id: int, user_id: int) -> ChatThread:
        """
        Get a thread the caller owns.

        Raises:
            NotFoundError: no thread with this id
            ForbiddenError: the thread belongs to another user
        """
        with _store_errors("select", "chat_threads"):
            thread = await self._repository.get_thread_by_id(thread_id)

        if thread is None:
            raise NotFoundError(
                f"Thread {thread_id} not found",
                operation="select",
                table="chat_threads",
            )
        if thread.user_id != user_id:
            raise ForbiddenError("Not allowed to access this thread")
        return thread

    async def create_thread(self, user_id: int, title: Optional[str] = None) -> ChatThread:
        """
        Create a new thread.

        Args:
            user_id: Owning user
            title: Optional title; blank or missing falls back to "New Chat"
        """
        title = (title or "").strip() or DEFAULT_THREAD_TITLE
        with _store_errors("insert", "chat_threads"):
            return await self._repository.create_thread(user_id=user_id, title=title)

    async def delete_thread(self, thread_id: int, user_id: int) -> None:
        """
        Delete a thread the caller owns, together with all of its messages.
        """
        await self.get_thread_for_user(thread_id, user_id)
        with _store_errors("delete", "chat_threads"):
            await self._repository.delete_thread(thread_id)

    # =========================================================================
    # Message Operations
    # =========================================================================

    async def get_thread_messages(self, thread_id: int) -> List[ChatMessage]:
        """
        Full conversation history in order.
        """
        with _store_errors("select", "chat_messages"):
            return await self._repository.get_thread_messages(thread_id)

    async def recent_messages(
        self,
        thread_id: int,
        limit: int,
        exclude_message_id: Optional[int] = None,
    ) -> List[ChatMessage]:
        """
        The last `limit` messages of a thread, oldest first.
        """
        with _store_errors("select", "chat_messages"):
            return await self._repository.get_recent_messages(
                thread_id,
                limit,
                exclude_message_id=exclude_message_id,
            )

    async def append_message(
        self,
        thread: ChatThread,
        role: MessageRole,
        content: str,
    ) -> ChatMessage:
        """
        Add a message to a thread and bump its updated_at.

        If this is a user message and the thread still has the
        placeholder title, the title is generated from the content.
        """
        with _store_errors("insert", "chat_messages"):
            message = await self._repository.add_message(
                thread=thread,
                role=MessageRole(role).value,
                content=content,
            )

            if role == MessageRole.USER and thread.title == DEFAULT_THREAD_TITLE:
                await self._repository.update_thread_title(
                    thread, self._generate_title(content)
                )

        return message

    def _generate_title(self, content: str) -> str:
        """
        Generate a thread title from message content.

        Returns:
            Truncated title (max 50 chars)
        """
        title = " ".join(content.split())

        if len(title) > self.TITLE_MAX_LENGTH:
            title = title[:self.TITLE_MAX_LENGTH - 3] + "..."

        return title or DEFAULT_THREAD_TITLE
