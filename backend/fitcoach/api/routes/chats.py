"""
Chat Routes for FitCoach

API endpoints for chat threads, message history and the streaming coach.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Request, Response
from sse_starlette.sse import EventSourceResponse

from fitcoach.api.dependencies import CompletionClientDep, CurrentUserId
from fitcoach.domain.chat import (
    ChatMessage,
    ChatStreamRequest,
    ChatThread,
    ChatThreadCreate,
)
from fitcoach.infrastructure.db.dependencies import ChatServiceDep
from fitcoach.infrastructure.services.chat_stream_service import ChatStreamRelay


router = APIRouter()


# ============================================================================
# Dependency Injection
# ============================================================================

def get_chat_stream_relay(client: CompletionClientDep) -> ChatStreamRelay:
    """Get ChatStreamRelay instance."""
    return ChatStreamRelay(client)


ChatStreamRelayDep = Annotated[ChatStreamRelay, Depends(get_chat_stream_relay)]


# ============================================================================
# Thread Endpoints
# ============================================================================

@router.get("/chat/threads", response_model=List[ChatThread])
async def list_threads(user_id: CurrentUserId, chat_service: ChatServiceDep):
    """
    List all chat threads for the current user.

    Returns threads ordered by most recently updated.
    """
    return await chat_service.list_threads(user_id)


@router.post("/chat/threads", response_model=ChatThread, status_code=201)
async def create_thread(
    user_id: CurrentUserId,
    chat_service: ChatServiceDep,
    body: ChatThreadCreate = None,
):
    """Create a new chat thread. Title defaults to "New Chat"."""
    return await chat_service.create_thread(user_id, body.title if body else None)


@router.get("/chat/threads/{thread_id}", response_model=ChatThread)
async def get_thread(
    thread_id: int,
    user_id: CurrentUserId,
    chat_service: ChatServiceDep,
):
    """Get a specific chat thread."""
    return await chat_service.get_thread_for_user(thread_id, user_id)


@router.delete("/chat/threads/{thread_id}", status_code=204)
async def delete_thread(
    thread_id: int,
    user_id: CurrentUserId,
    chat_service: ChatServiceDep,
):
    """Delete a chat thread and all its messages."""
    await chat_service.delete_thread(thread_id, user_id)
    return Response(status_code=204)


# ============================================================================
# Message Endpoints
# ============================================================================

@router.get("/chat/threads/{thread_id}/messages", response_model=List[ChatMessage])
async def get_messages(
    thread_id: int,
    user_id: CurrentUserId,
    chat_service: ChatServiceDep,
):
    """
    Get all messages in a chat thread.

    Returns messages in conversation order (oldest first).
    """
    await chat_service.get_thread_for_user(thread_id, user_id)
    return await chat_service.get_thread_messages(thread_id)


@router.post("/chat/stream")
async def stream_chat(
    body: ChatStreamRequest,
    request: Request,
    user_id: CurrentUserId,
    relay: ChatStreamRelayDep,
):
    """
    Send a message to the coach and stream the reply via Server-Sent Events.

    Validation, ownership and the user-message write happen before the
    stream opens and fail as ordinary JSON errors. The stream carries
    `data: {"content": ...}` frames and ends with `data: [DONE]`, or with a
    single `data: {"error": ..., "message": ...}` frame on failure.
    """
    turn = await relay.prepare(user_id, body)
    return EventSourceResponse(relay.stream(turn, request.is_disconnected), sep="\n")
