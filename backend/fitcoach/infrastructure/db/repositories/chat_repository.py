"""
Chat Repository for FitCoach

Repository for ChatThread and ChatMessage CRUD operations.
"""

from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.infrastructure.db.models.base import utcnow
from fitcoach.infrastructure.db.models.chat_thread import ChatThread
from fitcoach.infrastructure.db.models.chat_message import ChatMessage


class ChatRepository:
    """
    Repository for chat-related database operations.

    Manages both ChatThread and ChatMessage entities.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    # =========================================================================
    # Thread Operations
    # =========================================================================

    async def get_user_threads(self, user_id: int) -> List[ChatThread]:
        """
        Get all threads for a user, ordered by most recently updated.
        """
        stmt = (
            select(ChatThread)
            .where(ChatThread.user_id == user_id)
            .order_by(ChatThread.updated_at.desc(), ChatThread.id.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_thread_by_id(self, thread_id: int) -> Optional[ChatThread]:
        return await self._session.get(ChatThread, thread_id)

    async def create_thread(self, user_id: int, title: str) -> ChatThread:
        """
        Create a new chat thread.

        Args:
            user_id: Owning user
            title: Thread title

        Returns:
            Created ChatThread instance
        """
        now = utcnow()
        thread = ChatThread(
            user_id=user_id,
            title=title,
            created_at=now,
            updated_at=now,
        )
        self._session.add(thread)
        await self._session.flush()
        await self._session.refresh(thread)
        return thread

    async def update_thread_title(self, thread: ChatThread, title: str) -> ChatThread:
        thread.title = title
        self._session.add(thread)
        await self._session.flush()
        return thread

    async def touch_thread(self, thread: ChatThread) -> None:
        """
        Move a thread's updated_at forward.

        Never moves it backwards, even if the clock does.
        """
        now = utcnow()
        if thread.updated_at is None or now > thread.updated_at:
            thread.updated_at = now
        self._session.add(thread)
        await self._session.flush()

    async def delete_thread(self, thread_id: int) -> bool:
        """
        Delete a thread and all its messages.

        Returns:
            True if deleted, False if not found
        """
        await self._session.execute(
            delete(ChatMessage).where(ChatMessage.thread_id == thread_id)
        )
        result = await self._session.execute(
            delete(ChatThread).where(ChatThread.id == thread_id)
        )
        await self._session.flush()
        return result.rowcount > 0

    # =========================================================================
    # Message Operations
    # =========================================================================

    async def get_thread_messages(self, thread_id: int) -> List[ChatMessage]:
        """
        Get all messages in a thread in conversation order.
        """
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.thread_id == thread_id)
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_recent_messages(
        self,
        thread_id: int,
        limit: int,
        exclude_message_id: Optional[int] = None,
    ) -> List[ChatMessage]:
        """
        Get the last `limit` messages of a thread, oldest first.

        Args:
            thread_id: The thread's id
            limit: Maximum messages to return
            exclude_message_id: Message to leave out of the window

        Returns:
            Chronologically ordered suffix of the conversation
        """
        if limit <= 0:
            return []

        stmt = select(ChatMessage).where(ChatMessage.thread_id == thread_id)
        if exclude_message_id is not None:
            stmt = stmt.where(ChatMessage.id != exclude_message_id)
        stmt = (
            stmt.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        messages = list(result.scalars().all())
        messages.reverse()
        return messages

    async def add_message(
        self,
        thread: ChatThread,
        role: str,
        content: str,
    ) -> ChatMessage:
        """
        Add a new message to a thread and bump the thread timestamp.

        Both writes happen in the caller's transaction.
        """
        message = ChatMessage(
            thread_id=thread.id,
            role=role,
            content=content,
            created_at=utcnow(),
        )
        self._session.add(message)
        await self._session.flush()
        await self._session.refresh(message)

        await self.touch_thread(thread)

        return message
