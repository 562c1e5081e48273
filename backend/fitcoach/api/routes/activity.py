"""
Activity Routes

Workout sessions and progress logs for the caller.
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter

from fitcoach.api.dependencies import CurrentUserId
from fitcoach.domain.models import (
    ProgressLog,
    ProgressLogCreate,
    WorkoutSession,
    WorkoutSessionCreate,
)
from fitcoach.infrastructure.db.dependencies import ProgressRepoDep, WorkoutRepoDep
from fitcoach.infrastructure.db.models.base import utcnow
from fitcoach.infrastructure.db.models.progress_log import ProgressLogModel
from fitcoach.infrastructure.db.models.workout_session import WorkoutSessionModel
from fitcoach.infrastructure.exceptions import NotFoundError


router = APIRouter()


def _naive_utc(value: Optional[datetime]) -> datetime:
    """Store client timestamps as naive UTC like every other column."""
    if value is None:
        return utcnow()
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ============================================================================
# Workouts
# ============================================================================

@router.get("/workouts", response_model=List[WorkoutSession])
async def list_workouts(user_id: CurrentUserId, workouts: WorkoutRepoDep):
    """The caller's 20 most recent workouts, newest first."""
    return await workouts.get_recent(user_id)


@router.post("/workouts", response_model=WorkoutSession, status_code=201)
async def create_workout(
    body: WorkoutSessionCreate,
    user_id: CurrentUserId,
    workouts: WorkoutRepoDep,
):
    data = body.model_dump()
    data["date"] = _naive_utc(data.get("date"))
    return await workouts.add(WorkoutSessionModel(user_id=user_id, **data))


@router.get("/workouts/{workout_id}", response_model=WorkoutSession)
async def get_workout(
    workout_id: int,
    user_id: CurrentUserId,
    workouts: WorkoutRepoDep,
):
    """A single workout. Other users' workouts are reported as not found."""
    workout = await workouts.get_by_id(workout_id)
    if workout is None or workout.user_id != user_id:
        raise NotFoundError(
            "Workout not found",
            operation="select",
            table="workout_sessions",
        )
    return workout


# ============================================================================
# Progress
# ============================================================================

@router.get("/progress", response_model=List[ProgressLog])
async def list_progress(user_id: CurrentUserId, progress: ProgressRepoDep):
    """The caller's 30 most recent progress logs, newest first."""
    return await progress.get_recent(user_id)


@router.get("/progress/latest", response_model=Optional[ProgressLog])
async def latest_progress(user_id: CurrentUserId, progress: ProgressRepoDep):
    return await progress.get_latest(user_id)


@router.post("/progress", response_model=ProgressLog, status_code=201)
async def create_progress(
    body: ProgressLogCreate,
    user_id: CurrentUserId,
    progress: ProgressRepoDep,
):
    data = body.model_dump()
    data["date"] = _naive_utc(data.get("date"))
    return await progress.add(ProgressLogModel(user_id=user_id, **data))
