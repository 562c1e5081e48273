"""
Repository Layer for FitCoach

Exports all repository classes for dependency injection.
"""

from fitcoach.infrastructure.db.repositories.base_repository import BaseRepository
from fitcoach.infrastructure.db.repositories.user_repository import UserRepository
from fitcoach.infrastructure.db.repositories.profile_repository import (
    UserProfileRepository,
    CoachPersonaRepository,
)
from fitcoach.infrastructure.db.repositories.activity_repository import (
    WorkoutRepository,
    ProgressRepository,
)
from fitcoach.infrastructure.db.repositories.plan_repository import (
    TrainingPlanRepository,
    NutritionPlanRepository,
)
from fitcoach.infrastructure.db.repositories.chat_repository import ChatRepository


__all__ = [
    "BaseRepository",
    "UserRepository",
    "UserProfileRepository",
    "CoachPersonaRepository",
    "WorkoutRepository",
    "ProgressRepository",
    "TrainingPlanRepository",
    "NutritionPlanRepository",
    "ChatRepository",
]
