"""
Database Infrastructure Package for FitCoach

Exports database utilities, models, and repositories.
"""

from fitcoach.infrastructure.db.database import (
    DatabaseManager,
    get_db_manager,
    get_session,
    get_session_context,
    init_db,
    close_db,
)

from fitcoach.infrastructure.db.dependencies import (
    SessionDep,
    UserRepoDep,
    UserProfileRepoDep,
    CoachPersonaRepoDep,
    WorkoutRepoDep,
    ProgressRepoDep,
    TrainingPlanRepoDep,
    NutritionPlanRepoDep,
    ChatServiceDep,
)


__all__ = [
    # Database management
    "DatabaseManager",
    "get_db_manager",
    "get_session",
    "get_session_context",
    "init_db",
    "close_db",
    # Dependencies
    "SessionDep",
    "UserRepoDep",
    "UserProfileRepoDep",
    "CoachPersonaRepoDep",
    "WorkoutRepoDep",
    "ProgressRepoDep",
    "TrainingPlanRepoDep",
    "NutritionPlanRepoDep",
    "ChatServiceDep",
]
