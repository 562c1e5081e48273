"""
Plan Routes

Active training/nutrition plans, AI plan generation and the weekly check-in.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fitcoach.api.dependencies import CompletionClientDep, CurrentUserId
from fitcoach.domain.models import NutritionPlan, TrainingPlan
from fitcoach.infrastructure.db.dependencies import (
    NutritionPlanRepoDep,
    SessionDep,
    TrainingPlanRepoDep,
)
from fitcoach.infrastructure.services.plan_service import PlanService


router = APIRouter()


class CheckInResponse(BaseModel):
    message: str


def get_plan_service(session: SessionDep, client: CompletionClientDep) -> PlanService:
    """Get PlanService instance."""
    return PlanService(session, client)


PlanServiceDep = Annotated[PlanService, Depends(get_plan_service)]


# ============================================================================
# Training
# ============================================================================

@router.get("/plans/training", response_model=Optional[TrainingPlan])
async def get_training_plan(user_id: CurrentUserId, plans: TrainingPlanRepoDep):
    """The caller's active training plan, or null."""
    return await plans.get_active(user_id)


@router.post("/plans/training/generate", response_model=TrainingPlan)
async def generate_training_plan(user_id: CurrentUserId, service: PlanServiceDep):
    """
    Generate a new training plan from the caller's profile.

    The new plan replaces the active one. Requires a profile (400 otherwise).
    """
    return await service.generate_training_plan(user_id)


# ============================================================================
# Nutrition
# ============================================================================

@router.get("/plans/nutrition", response_model=Optional[NutritionPlan])
async def get_nutrition_plan(user_id: CurrentUserId, plans: NutritionPlanRepoDep):
    return await plans.get_active(user_id)


@router.post("/plans/nutrition/generate", response_model=NutritionPlan)
async def generate_nutrition_plan(user_id: CurrentUserId, service: PlanServiceDep):
    """
    Compute calorie/macro targets and generate meal suggestions.

    Requires age, height, weight and gender on the profile (400 otherwise).
    """
    return await service.generate_nutrition_plan(user_id)


# ============================================================================
# Weekly check-in
# ============================================================================

@router.post("/coach/weekly-checkin", response_model=CheckInResponse)
async def weekly_checkin(user_id: CurrentUserId, service: PlanServiceDep):
    """Coach feedback on the last 7 progress logs and workouts."""
    return CheckInResponse(message=await service.weekly_checkin(user_id))
