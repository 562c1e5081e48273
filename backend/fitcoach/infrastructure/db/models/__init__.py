"""
SQLModel ORM Models for FitCoach

Exports all database models for Alembic autogenerate and application use.
Import models here to register them with SQLModel.metadata.
"""

from fitcoach.infrastructure.db.models.base import utcnow
from fitcoach.infrastructure.db.models.user import User
from fitcoach.infrastructure.db.models.profile import UserProfile
from fitcoach.infrastructure.db.models.coach_persona import CoachPersonaModel
from fitcoach.infrastructure.db.models.workout_session import WorkoutSessionModel
from fitcoach.infrastructure.db.models.progress_log import ProgressLogModel
from fitcoach.infrastructure.db.models.plan import (
    TrainingPlanModel,
    NutritionPlanModel,
)
from fitcoach.infrastructure.db.models.chat_thread import ChatThread
from fitcoach.infrastructure.db.models.chat_message import ChatMessage


__all__ = [
    "utcnow",
    # Accounts
    "User",
    "UserProfile",
    "CoachPersonaModel",
    # Activity
    "WorkoutSessionModel",
    "ProgressLogModel",
    # Plans
    "TrainingPlanModel",
    "NutritionPlanModel",
    # Chat
    "ChatThread",
    "ChatMessage",
]
