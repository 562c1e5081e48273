"""
Plan SQLModels for FitCoach

Generated training and nutrition plans. A user has at most one
active plan of each kind; older plans are kept with is_active=False.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, ForeignKey, Integer, Text
from sqlmodel import Field, SQLModel

from fitcoach.infrastructure.db.models.base import timestamp_column, utcnow


class TrainingPlanModel(SQLModel, table=True):
    __tablename__ = "training_plans"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        ...,
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            index=True,
            nullable=False,
        ),
    )

    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    plan: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    is_active: bool = Field(default=True, nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class NutritionPlanModel(SQLModel, table=True):
    __tablename__ = "nutrition_plans"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        ...,
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            index=True,
            nullable=False,
        ),
    )

    name: str = Field(..., max_length=200)
    calories: int = Field(..., description="kcal/day")
    protein: int = Field(..., description="grams")
    carbs: int = Field(..., description="grams")
    fats: int = Field(..., description="grams")
    meal_suggestions: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    is_active: bool = Field(default=True, nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
