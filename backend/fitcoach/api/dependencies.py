"""
API Dependencies

FastAPI dependency injection for authentication and common services.

Login state is an opaque session id in an HttpOnly cookie, resolved
against the injectable SessionStore.
"""

import logging
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Request

from fitcoach.config.settings import get_settings
from fitcoach.infrastructure.ai.completion_client import (
    CompletionClient,
    get_completion_client,
)
from fitcoach.infrastructure.auth.session_store import (
    InMemorySessionStore,
    SessionStore,
)
from fitcoach.infrastructure.exceptions import AuthError


logger = logging.getLogger(__name__)


@lru_cache
def get_session_store() -> SessionStore:
    """Process-wide session store."""
    settings = get_settings()
    return InMemorySessionStore(
        ttl_seconds=settings.session_ttl_seconds,
        sweep_interval_seconds=settings.session_sweep_interval_seconds,
    )


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


def get_session_id(request: Request) -> Optional[str]:
    """Read the session cookie, if any."""
    return request.cookies.get(get_settings().session_cookie_name)


async def get_current_user_id(
    store: SessionStoreDep,
    session_id: Annotated[Optional[str], Depends(get_session_id)],
) -> int:
    """
    Resolve the logged-in user from the session cookie.

    Returns:
        Authenticated user id

    Raises:
        AuthError: no cookie, or the session is unknown or expired
    """
    if not session_id:
        raise AuthError("Not authenticated")

    user_id = await store.get_user_id(session_id)
    if user_id is None:
        logger.debug("Rejected unknown or expired session")
        raise AuthError("Session expired or invalid")
    return user_id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
CompletionClientDep = Annotated[CompletionClient, Depends(get_completion_client)]
