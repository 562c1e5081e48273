"""
Profile Routes

Read and upsert the caller's profile and coach persona.
"""

from typing import Optional

from fastapi import APIRouter

from fitcoach.api.dependencies import CurrentUserId
from fitcoach.domain.models import (
    CoachPersona,
    CoachPersonaUpsert,
    Profile,
    ProfileUpsert,
)
from fitcoach.infrastructure.db.dependencies import (
    CoachPersonaRepoDep,
    UserProfileRepoDep,
)


router = APIRouter()


# ============================================================================
# Profile
# ============================================================================

@router.get("/profile", response_model=Optional[Profile])
async def get_profile(user_id: CurrentUserId, profiles: UserProfileRepoDep):
    """The caller's profile, or null if it was never filled in."""
    return await profiles.get_by_user_id(user_id)


@router.post("/profile", response_model=Profile)
async def upsert_profile(
    body: ProfileUpsert,
    user_id: CurrentUserId,
    profiles: UserProfileRepoDep,
):
    """
    Create or update the caller's profile.

    Only fields present in the body are changed.
    """
    return await profiles.upsert(user_id, body.model_dump(exclude_unset=True, mode="json"))


# ============================================================================
# Coach Persona
# ============================================================================

@router.get("/coach", response_model=Optional[CoachPersona])
async def get_coach(user_id: CurrentUserId, personas: CoachPersonaRepoDep):
    return await personas.get_by_user_id(user_id)


@router.post("/coach", response_model=CoachPersona)
async def upsert_coach(
    body: CoachPersonaUpsert,
    user_id: CurrentUserId,
    personas: CoachPersonaRepoDep,
):
    """Create or update the caller's coach persona; omitted fields keep their defaults."""
    return await personas.upsert(user_id, body.model_dump(exclude_unset=True, mode="json"))
