"""
Dependency Injection Providers for FitCoach

Provides FastAPI dependencies for database sessions and repositories.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.infrastructure.db.chat_service import ChatService
from fitcoach.infrastructure.db.database import get_session
from fitcoach.infrastructure.db.repositories import (
    UserRepository,
    UserProfileRepository,
    CoachPersonaRepository,
    WorkoutRepository,
    ProgressRepository,
    TrainingPlanRepository,
    NutritionPlanRepository,
)


# Type alias for session dependency
SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_user_repository(
    session: SessionDep,
) -> AsyncGenerator[UserRepository, None]:
    """
    Dependency provider for UserRepository.

    Usage:
        @router.post("/register")
        async def register(users: UserRepoDep):
            ...
    """
    yield UserRepository(session)


async def get_user_profile_repository(
    session: SessionDep,
) -> AsyncGenerator[UserProfileRepository, None]:
    yield UserProfileRepository(session)


async def get_coach_persona_repository(
    session: SessionDep,
) -> AsyncGenerator[CoachPersonaRepository, None]:
    yield CoachPersonaRepository(session)


async def get_workout_repository(
    session: SessionDep,
) -> AsyncGenerator[WorkoutRepository, None]:
    yield WorkoutRepository(session)


async def get_progress_repository(
    session: SessionDep,
) -> AsyncGenerator[ProgressRepository, None]:
    yield ProgressRepository(session)


async def get_training_plan_repository(
    session: SessionDep,
) -> AsyncGenerator[TrainingPlanRepository, None]:
    yield TrainingPlanRepository(session)


async def get_nutrition_plan_repository(
    session: SessionDep,
) -> AsyncGenerator[NutritionPlanRepository, None]:
    yield NutritionPlanRepository(session)


async def get_chat_service(
    session: SessionDep,
) -> AsyncGenerator[ChatService, None]:
    yield ChatService(session)


# Type aliases for repository dependencies
UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
UserProfileRepoDep = Annotated[UserProfileRepository, Depends(get_user_profile_repository)]
CoachPersonaRepoDep = Annotated[CoachPersonaRepository, Depends(get_coach_persona_repository)]
WorkoutRepoDep = Annotated[WorkoutRepository, Depends(get_workout_repository)]
ProgressRepoDep = Annotated[ProgressRepository, Depends(get_progress_repository)]
TrainingPlanRepoDep = Annotated[TrainingPlanRepository, Depends(get_training_plan_repository)]
NutritionPlanRepoDep = Annotated[NutritionPlanRepository, Depends(get_nutrition_plan_repository)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
