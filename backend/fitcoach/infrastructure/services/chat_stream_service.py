"""
Chat Stream Relay for FitCoach

Runs one coaching turn end to end:

    IDLE -> USER_MESSAGE_PERSISTED -> CONTEXT_BUILT -> STREAMING -> COMPLETING -> DONE
                                                          |             |
                                                          +-> ABORTED <-+

prepare() does everything that can fail with an ordinary HTTP error
(validation, ownership, storing the user message, building the prompt).
stream() relays the upstream completion as SSE event dicts and stores
exactly one assistant message, only if the upstream stream finished and
the client is still listening.
"""

import asyncio
import json
import logging
from contextlib import suppress
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncContextManager,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
)

from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.settings import Settings, get_settings
from fitcoach.domain.chat import ChatStreamRequest, MessageRole, RelayState
from fitcoach.domain.coach_context import Language, build_system_prompt
from fitcoach.infrastructure.ai.completion_client import (
    ChatTurn,
    CompletionClient,
    SamplingParams,
)
from fitcoach.infrastructure.db.chat_service import ChatService
from fitcoach.infrastructure.db.database import get_session_context
from fitcoach.infrastructure.exceptions import (
    FitCoachError,
    PersistenceError,
    RateLimitError,
    StreamTimeoutError,
    UpstreamError,
    ValidationError,
)
from fitcoach.infrastructure.services.context_service import (
    load_coach_context,
    resolve_language,
)


logger = logging.getLogger(__name__)


SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]
DisconnectCheck = Callable[[], Awaitable[bool]]

# Prior messages sent upstream, not counting the system prompt or the new message
CONTEXT_WINDOW = 10

DONE_EVENT = {"data": "[DONE]"}

_END = object()


@dataclass
class PreparedTurn:
    """A validated chat turn whose user message is already stored."""
    user_id: int
    thread_id: int
    language: Language
    upstream_messages: List[ChatTurn] = field(default_factory=list)
    state: RelayState = RelayState.IDLE
    fragments: List[str] = field(default_factory=list)

    @property
    def content(self) -> str:
        return "".join(self.fragments)


def error_code(error: Exception) -> str:
    """Short machine-readable code for an error frame."""
    if isinstance(error, StreamTimeoutError):
        return "timeout"
    if isinstance(error, RateLimitError):
        return "rate_limit"
    if isinstance(error, UpstreamError):
        return "upstream_error"
    if isinstance(error, PersistenceError):
        return "persistence_error"
    return "internal_error"


def error_event(error: Exception) -> Dict[str, str]:
    message = error.message if isinstance(error, FitCoachError) else "Unexpected error"
    return {"data": json.dumps({"error": error_code(error), "message": message})}


def content_event(fragment: str) -> Dict[str, str]:
    return {"data": json.dumps({"content": fragment})}


class ChatStreamRelay:
    """
    Relay between one client request and one upstream completion stream.

    Args:
        client: Completion client for the configured provider
        session_factory: Opens a committing session (defaults to the app database)
        settings: Sampling and timeout configuration
    """

    def __init__(
        self,
        client: CompletionClient,
        session_factory: SessionFactory = get_session_context,
        settings: Optional[Settings] = None,
    ):
        self._client = client
        self._session_factory = session_factory
        self._settings = settings or get_settings()
        self._params = SamplingParams.for_chat(self._settings)

    # =========================================================================
    # Prepare
    # =========================================================================

    async def prepare(self, user_id: int, request: ChatStreamRequest) -> PreparedTurn:
        """
        Validate the request, store the user message and build the
        upstream message list.

        Raises:
            ValidationError: missing threadId or blank message
            NotFoundError: unknown thread
            ForbiddenError: thread owned by another user
            PersistenceError: store failure
        """
        if request.thread_id is None:
            raise ValidationError("threadId is required")
        if not request.message or not request.message.strip():
            raise ValidationError("message is required")

        async with self._session_factory() as session:
            chat = ChatService(session)
            thread = await chat.get_thread_for_user(request.thread_id, user_id)
            user_message = await chat.append_message(
                thread, MessageRole.USER, request.message
            )

        turn = PreparedTurn(
            user_id=user_id,
            thread_id=request.thread_id,
            language=self._settings.default_language,
            state=RelayState.USER_MESSAGE_PERSISTED,
        )

        async with self._session_factory() as session:
            inputs = await load_coach_context(session, user_id)
            history = await ChatService(session).recent_messages(
                request.thread_id,
                CONTEXT_WINDOW,
                exclude_message_id=user_message.id,
            )

        turn.language = resolve_language(request.language, inputs)
        turn.upstream_messages = [
            {"role": "system", "content": build_system_prompt(inputs, turn.language)}
        ]
        turn.upstream_messages.extend(
            {"role": message.role, "content": message.content} for message in history
        )
        turn.upstream_messages.append({"role": MessageRole.USER.value, "content": request.message})
        turn.state = RelayState.CONTEXT_BUILT

        logger.info(
            f"Prepared chat turn for thread {turn.thread_id} "
            f"({len(history)} prior messages, language={turn.language})"
        )
        return turn

    # =========================================================================
    # Stream
    # =========================================================================

    async def _pump(self, messages: List[ChatTurn], queue: asyncio.Queue) -> None:
        """Producer: move upstream fragments into the queue, then _END or the error."""
        stream = self._client.stream_chat(messages, self._params)
        try:
            async for fragment in stream:
                await queue.put(fragment)
            await queue.put(_END)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            await queue.put(e)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    async def _persist_reply(self, turn: PreparedTurn) -> None:
        async with self._session_factory() as session:
            chat = ChatService(session)
            thread = await chat.get_thread_for_user(turn.thread_id, turn.user_id)
            await chat.append_message(thread, MessageRole.ASSISTANT, turn.content)

    def _abort(self, turn: PreparedTurn, reason: str) -> None:
        turn.state = RelayState.ABORTED
        logger.info(
            f"Chat turn on thread {turn.thread_id} aborted ({reason}) "
            f"after {len(turn.fragments)} fragments"
        )

    async def stream(
        self,
        turn: PreparedTurn,
        is_disconnected: DisconnectCheck,
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Relay the upstream completion as SSE event dicts.

        Yields {"data": '{"content": ...}'} per fragment and
        {"data": "[DONE]"} after the assistant message is stored. Upstream,
        timeout and store failures end the stream with one error event;
        a client disconnect ends it silently. Nothing is stored on abort.
        """
        turn.state = RelayState.STREAMING
        queue: asyncio.Queue = asyncio.Queue()
        producer = asyncio.create_task(self._pump(turn.upstream_messages, queue))
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._settings.chat_stream_timeout_seconds

        try:
            while True:
                remaining = deadline - loop.time()
                try:
                    if remaining <= 0:
                        raise asyncio.TimeoutError
                    item = await asyncio.wait_for(queue.get(), remaining)
                except asyncio.TimeoutError:
                    raise StreamTimeoutError(
                        f"Reply took longer than {self._settings.chat_stream_timeout_seconds:g}s",
                        model=self._client.model,
                        operation="stream_chat",
                    )

                if item is _END:
                    break
                if isinstance(item, Exception):
                    raise item

                if await is_disconnected():
                    self._abort(turn, "client disconnected")
                    return

                turn.fragments.append(item)
                yield content_event(item)

            if await is_disconnected():
                self._abort(turn, "client disconnected")
                return

            turn.state = RelayState.COMPLETING
            await asyncio.shield(self._persist_reply(turn))
            turn.state = RelayState.DONE
            yield DONE_EVENT

        except (asyncio.CancelledError, GeneratorExit):
            if turn.state == RelayState.STREAMING:
                self._abort(turn, "cancelled")
            raise
        except FitCoachError as e:
            self._abort(turn, e.__class__.__name__)
            if isinstance(e, UpstreamError):
                logger.warning(f"Upstream failure on thread {turn.thread_id}: {e.message}")
            else:
                logger.error(f"Chat turn on thread {turn.thread_id} failed: {e.message}")
            yield error_event(e)
        except Exception as e:
            self._abort(turn, "unexpected error")
            logger.exception(f"Unexpected error relaying thread {turn.thread_id}: {e}")
            yield error_event(e)
        finally:
            if not producer.done():
                producer.cancel()
                with suppress(asyncio.CancelledError):
                    await producer
