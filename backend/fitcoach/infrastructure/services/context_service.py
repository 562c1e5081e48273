"""
Coach Context Loader

Reads the user's latest profile, persona, progress and workouts and
returns them as immutable snapshots for prompt assembly.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.settings import settings
from fitcoach.domain.coach_context import (
    RECENT_WORKOUT_LIMIT,
    CoachContextInputs,
    CoachPersonaSnapshot,
    Language,
    ProfileSnapshot,
    ProgressSnapshot,
    WorkoutSnapshot,
    normalize_language,
)
from fitcoach.infrastructure.db.repositories import (
    CoachPersonaRepository,
    ProgressRepository,
    UserProfileRepository,
    WorkoutRepository,
)
from fitcoach.infrastructure.exceptions import PersistenceError


async def load_coach_context(
    session: AsyncSession,
    user_id: int,
    workout_limit: int = RECENT_WORKOUT_LIMIT,
) -> CoachContextInputs:
    """
    Snapshot everything the coach should know about a user.

    Raises:
        PersistenceError: any of the reads failed
    """
    try:
        profile = await UserProfileRepository(session).get_by_user_id(user_id)
        persona = await CoachPersonaRepository(session).get_by_user_id(user_id)
        progress = await ProgressRepository(session).get_latest(user_id)
        workouts = await WorkoutRepository(session).get_recent(user_id, limit=workout_limit)
    except SQLAlchemyError as e:
        raise PersistenceError(
            "Failed to load coach context",
            operation="select",
            original_error=e,
        )

    return CoachContextInputs(
        profile=ProfileSnapshot.model_validate(profile) if profile else None,
        coach_persona=CoachPersonaSnapshot.model_validate(persona) if persona else None,
        latest_progress=ProgressSnapshot.model_validate(progress) if progress else None,
        recent_workouts=[WorkoutSnapshot.model_validate(w) for w in workouts],
    )


def resolve_language(
    requested: Optional[str],
    inputs: CoachContextInputs,
) -> Language:
    """
    Reply language: the request's choice, then the coach persona's
    language, then the configured default.
    """
    if requested:
        return normalize_language(requested, settings.default_language)
    if inputs.coach_persona and inputs.coach_persona.language:
        return normalize_language(inputs.coach_persona.language, settings.default_language)
    return settings.default_language
