"""
Plan Generation Service for FitCoach

Non-streaming generation of training plans, nutrition plans and weekly
check-ins. Each call is a single JSON-mode (or plain) completion; the
result is stored as the user's new active plan.
"""

import json
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.settings import Settings, get_settings
from fitcoach.domain.coach_context import (
    ProfileSnapshot,
    ProgressSnapshot,
    WorkoutSnapshot,
)
from fitcoach.domain.nutrition import (
    calculate_bmr,
    calculate_macros,
    calculate_target_calories,
    calculate_tdee,
)
from fitcoach.domain.prompts import (
    NUTRITION_PLAN_SYSTEM,
    TRAINING_PLAN_SYSTEM,
    WEEKLY_CHECKIN_SYSTEM,
    build_nutrition_plan_prompt,
    build_training_plan_prompt,
    build_weekly_checkin_prompt,
)
from fitcoach.infrastructure.ai.completion_client import CompletionClient, SamplingParams
from fitcoach.infrastructure.db.models.plan import NutritionPlanModel, TrainingPlanModel
from fitcoach.infrastructure.db.repositories import (
    NutritionPlanRepository,
    ProgressRepository,
    TrainingPlanRepository,
    UserProfileRepository,
    WorkoutRepository,
)
from fitcoach.infrastructure.exceptions import UpstreamError, ValidationError


logger = logging.getLogger(__name__)

CHECKIN_HISTORY_LIMIT = 7
CHECKIN_TEMPERATURE = 0.8
DEFAULT_TRAINING_PLAN_NAME = "Custom Training Plan"


class PlanService:
    """
    Generates and stores AI plans for one user session.

    Args:
        session: Request-scoped database session
        client: Completion client for the configured provider
    """

    def __init__(
        self,
        session: AsyncSession,
        client: CompletionClient,
        settings: Optional[Settings] = None,
    ):
        self._session = session
        self._client = client
        self._settings = settings or get_settings()
        self._params = SamplingParams.for_plans(self._settings)

    async def _profile_snapshot(self, user_id: int, error_message: str) -> ProfileSnapshot:
        profile = await UserProfileRepository(self._session).get_by_user_id(user_id)
        if profile is None:
            raise ValidationError(error_message)
        return ProfileSnapshot.model_validate(profile)

    async def _complete_json(self, system: str, prompt: str, operation: str) -> Dict[str, Any]:
        content = await self._client.complete(
            [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            self._params,
            json_mode=True,
        )
        try:
            data = json.loads(content or "{}")
        except json.JSONDecodeError as e:
            logger.error(f"{operation}: model returned invalid JSON: {content[:200]}")
            raise UpstreamError(
                "Model returned invalid JSON",
                model=self._client.model,
                operation=operation,
                original_error=e,
            )
        if not isinstance(data, dict):
            raise UpstreamError(
                "Model returned a non-object JSON value",
                model=self._client.model,
                operation=operation,
            )
        return data

    async def generate_training_plan(self, user_id: int) -> TrainingPlanModel:
        """
        Generate a training plan from the user's profile and make it active.

        Raises:
            ValidationError: the user has no profile yet
        """
        profile = await self._profile_snapshot(user_id, "Profile required to generate plan")

        plan_data = await self._complete_json(
            TRAINING_PLAN_SYSTEM,
            build_training_plan_prompt(profile),
            "generate_training_plan",
        )

        plan = TrainingPlanModel(
            user_id=user_id,
            name=plan_data.get("name") or DEFAULT_TRAINING_PLAN_NAME,
            description=plan_data.get("description"),
            plan=plan_data,
        )
        saved = await TrainingPlanRepository(self._session).replace_active(plan)
        logger.info(f"Generated training plan {saved.id} for user {user_id}")
        return saved

    async def generate_nutrition_plan(self, user_id: int) -> NutritionPlanModel:
        """
        Compute calorie and macro targets, ask the model for meal
        suggestions, and store the result as the active nutrition plan.

        Raises:
            ValidationError: age, height, weight or gender is missing
        """
        profile = await self._profile_snapshot(user_id, "Complete profile required")
        if not (profile.age and profile.height and profile.weight and profile.gender):
            raise ValidationError("Complete profile required")

        bmr = calculate_bmr(profile.weight, profile.height, profile.age, profile.gender)
        tdee = calculate_tdee(bmr, profile.activity_level, profile.days_per_week)
        goal = profile.goal or "recomp"
        calories = calculate_target_calories(tdee, goal)
        macros = calculate_macros(calories, profile.weight, goal)

        meal_data = await self._complete_json(
            NUTRITION_PLAN_SYSTEM,
            build_nutrition_plan_prompt(profile, calories, macros),
            "generate_nutrition_plan",
        )

        plan = NutritionPlanModel(
            user_id=user_id,
            name=f"{goal.upper()} Nutrition Plan",
            calories=calories,
            protein=macros.protein,
            carbs=macros.carbs,
            fats=macros.fats,
            meal_suggestions=meal_data,
        )
        saved = await NutritionPlanRepository(self._session).replace_active(plan)
        logger.info(f"Generated nutrition plan {saved.id} for user {user_id} ({calories} kcal)")
        return saved

    async def weekly_checkin(self, user_id: int) -> str:
        """
        Coach-style summary of the last week of progress and workouts.

        Raises:
            ValidationError: the user has no profile yet
        """
        profile = await self._profile_snapshot(user_id, "Profile required")
        progress = await ProgressRepository(self._session).get_recent(
            user_id, limit=CHECKIN_HISTORY_LIMIT
        )
        workouts = await WorkoutRepository(self._session).get_recent(
            user_id, limit=CHECKIN_HISTORY_LIMIT
        )

        prompt = build_weekly_checkin_prompt(
            profile,
            [ProgressSnapshot.model_validate(p) for p in progress],
            [WorkoutSnapshot.model_validate(w) for w in workouts],
        )
        return await self._client.complete(
            [
                {"role": "system", "content": WEEKLY_CHECKIN_SYSTEM},
                {"role": "user", "content": prompt},
            ],
            replace(self._params, temperature=CHECKIN_TEMPERATURE),
        )
