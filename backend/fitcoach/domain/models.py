"""
Domain Models for FitCoach

Pure Python/Pydantic models with no framework dependencies.
These models define the core business entities and validation rules.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class FitnessGoal(str, Enum):
    """Primary training goal; drives calorie and macro targets."""
    CUT = "cut"
    BULK = "bulk"
    RECOMP = "recomp"
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Equipment(str, Enum):
    FULL_GYM = "full_gym"
    HOME_GYM = "home_gym"
    DUMBBELLS = "dumbbells"
    BODYWEIGHT = "bodyweight"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTREMELY_ACTIVE = "extremely_active"


class CoachStyle(str, Enum):
    STRICT = "strict"
    SUPPORTIVE = "supportive"
    ANALYTICAL = "analytical"


class CoachTone(str, Enum):
    ENERGETIC = "energetic"
    CALM = "calm"
    AGGRESSIVE = "aggressive"


# ============================================================================
# Profile
# ============================================================================

class ProfileUpsert(BaseModel):
    """Schema for creating or updating the caller's profile. All fields optional."""
    age: Optional[int] = Field(None, ge=13, le=120)
    gender: Optional[Gender] = None
    height: Optional[float] = Field(None, ge=50, le=250, description="Height in cm")
    weight: Optional[float] = Field(None, ge=20, le=300, description="Weight in kg")
    goal: Optional[FitnessGoal] = None
    experience_level: Optional[ExperienceLevel] = None
    activity_level: Optional[ActivityLevel] = None
    days_per_week: Optional[int] = Field(None, ge=1, le=7)
    session_length: Optional[int] = Field(None, ge=15, le=240, description="Minutes")
    equipment: Optional[Equipment] = None
    injuries: Optional[str] = Field(None, max_length=2000)
    allergies: Optional[str] = Field(None, max_length=2000)

    @field_validator("injuries", "allergies")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class Profile(ProfileUpsert):
    """Complete profile entity from database."""
    id: int
    user_id: int
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Coach Persona
# ============================================================================

class CoachPersonaUpsert(BaseModel):
    """Schema for creating or updating the caller's coach persona."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    style: Optional[CoachStyle] = None
    tone: Optional[CoachTone] = None
    language: Optional[str] = Field(None, min_length=2, max_length=50)


class CoachPersona(BaseModel):
    id: int
    user_id: int
    name: str
    style: CoachStyle
    tone: CoachTone
    language: str
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Activity Logs
# ============================================================================

class WorkoutSessionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    date: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=0, le=1440, description="Minutes")
    notes: Optional[str] = None
    exercises: Optional[List[Dict[str, Any]]] = None


class WorkoutSession(BaseModel):
    id: int
    user_id: int
    name: str
    date: datetime
    duration: Optional[int] = None
    notes: Optional[str] = None
    exercises: Optional[List[Dict[str, Any]]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProgressLogCreate(BaseModel):
    date: Optional[datetime] = None
    weight: Optional[float] = Field(None, ge=20, le=300)
    body_fat: Optional[float] = Field(None, ge=1, le=75)
    measurements: Optional[Dict[str, float]] = None
    photos: Optional[List[str]] = None
    notes: Optional[str] = None


class ProgressLog(BaseModel):
    id: int
    user_id: int
    date: datetime
    weight: Optional[float] = None
    body_fat: Optional[float] = None
    measurements: Optional[Dict[str, float]] = None
    photos: Optional[List[str]] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Plans
# ============================================================================

class TrainingPlan(BaseModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    plan: Dict[str, Any]
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NutritionPlan(BaseModel):
    id: int
    user_id: int
    name: str
    calories: int
    protein: int
    carbs: int
    fats: int
    meal_suggestions: Optional[Dict[str, Any]] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Macros(BaseModel):
    """Daily macro targets in grams."""
    protein: int
    carbs: int
    fats: int
