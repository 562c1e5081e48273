# API Routes Module
from fitcoach.api.routes import (
    auth,
    profiles,
    activity,
    plans,
    chats,
)

__all__ = [
    "auth",
    "profiles",
    "activity",
    "plans",
    "chats",
]
