"""
Plan Generation Prompts for FitCoach

Prompt templates for the non-streaming generation endpoints
(training plan, nutrition plan, weekly check-in).
"""

from typing import List

from fitcoach.domain.coach_context import (
    ProfileSnapshot,
    ProgressSnapshot,
    WorkoutSnapshot,
)
from fitcoach.domain.models import Macros


TRAINING_PLAN_SYSTEM = (
    "You are a professional fitness coach. Generate training plans in valid JSON format only."
)
NUTRITION_PLAN_SYSTEM = (
    "You are a professional nutrition coach. Generate meal plans in valid JSON format only."
)
WEEKLY_CHECKIN_SYSTEM = "You are a professional fitness coach providing weekly check-ins."


def _optional_line(label: str, value) -> str:
    return f"- {label}: {value}\n" if value else ""


def build_training_plan_prompt(profile: ProfileSnapshot) -> str:
    return f"""Generate a complete training plan for this user in JSON format.

User Profile:
- Goal: {profile.goal}
- Experience: {profile.experience_level}
- Days per week: {profile.days_per_week}
- Session length: {profile.session_length} minutes
- Equipment: {profile.equipment}
{_optional_line("Injuries", profile.injuries)}
Return a JSON object with this structure:
{{
  "name": "Plan Name",
  "description": "Brief description",
  "weeks": 4,
  "days": [
    {{
      "dayNumber": 1,
      "name": "Push Day",
      "exercises": [
        {{"name": "Bench Press", "sets": 4, "reps": "8-10", "rest": "90s", "notes": "Focus on form"}}
      ]
    }}
  ]
}}

Include progressive overload notes and only use exercises that match the available equipment."""


def build_nutrition_plan_prompt(profile: ProfileSnapshot, calories: int, macros: Macros) -> str:
    return f"""Generate a nutrition plan with meal suggestions for this user.

User Profile:
- Goal: {profile.goal}
- Weight: {profile.weight} kg
- Activity: {profile.days_per_week} training days/week
{_optional_line("Dietary Restrictions", profile.allergies)}
Calculated Targets:
- Calories: {calories} kcal/day
- Protein: {macros.protein}g
- Carbs: {macros.carbs}g
- Fats: {macros.fats}g

Return a JSON object with this structure:
{{
  "mealPlan": [
    {{
      "meal": "Breakfast",
      "suggestions": ["Option 1", "Option 2"],
      "macros": {{"protein": 30, "carbs": 50, "fats": 15}}
    }}
  ],
  "tips": ["Tip 1", "Tip 2"]
}}

Provide 3-4 meals with practical, realistic suggestions."""


def build_weekly_checkin_prompt(
    profile: ProfileSnapshot,
    progress_logs: List[ProgressSnapshot],
    workouts: List[WorkoutSnapshot],
) -> str:
    progress_lines = "\n".join(
        f"- {p.date.strftime('%Y-%m-%d') if p.date else 'N/A'}: {p.weight if p.weight is not None else 'N/A'} kg"
        for p in progress_logs
    ) or "- No progress logged"
    workout_lines = "\n".join(
        f"- {w.name} ({w.duration or 'N/A'} min)" for w in workouts
    ) or "- No workouts logged"

    return f"""Perform a weekly check-in for this user.

User Profile:
- Goal: {profile.goal}
- Current Weight: {profile.weight} kg

Progress This Week:
{progress_lines}

Workouts This Week: {len(workouts)}
{workout_lines}

Provide:
1. A brief assessment of their progress
2. What's going well
3. Areas to improve
4. Specific actionable advice for next week
5. Motivation

Keep it concise but personal and coach-like."""
