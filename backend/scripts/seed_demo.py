#!/usr/bin/env python3
"""
Seed script to populate the database with a demo account.

Creates one user with a profile, coach persona, active training and
nutrition plans, a couple of logged workouts, a short weight history and
a starter chat thread, so the app has something to show right after
login.

Run: python scripts/seed_demo.py [--username demo] [--password demo123]
"""

import argparse
import asyncio
import logging
import sys
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fitcoach.domain.chat import MessageRole
from fitcoach.infrastructure.auth.passwords import hash_password
from fitcoach.infrastructure.db.chat_service import ChatService
from fitcoach.infrastructure.db.database import close_db, get_session_context, init_db
from fitcoach.infrastructure.db.models import (
    NutritionPlanModel,
    ProgressLogModel,
    TrainingPlanModel,
    WorkoutSessionModel,
    utcnow,
)
from fitcoach.infrastructure.db.repositories import (
    CoachPersonaRepository,
    NutritionPlanRepository,
    ProgressRepository,
    TrainingPlanRepository,
    UserProfileRepository,
    UserRepository,
    WorkoutRepository,
)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============== DEMO DATA ==============

DEMO_PROFILE = {
    "age": 28,
    "gender": "male",
    "height": 180.0,
    "weight": 80.0,
    "goal": "hypertrophy",
    "experience_level": "intermediate",
    "activity_level": "moderately_active",
    "days_per_week": 4,
    "session_length": 60,
    "equipment": "full_gym",
}

DEMO_COACH = {
    "name": "Coach Mike",
    "style": "supportive",
    "tone": "energetic",
    "language": "English",
}


def _exercise(name: str, sets: int, reps: str, rest: str, notes: str) -> Dict[str, Any]:
    return {"name": name, "sets": sets, "reps": reps, "rest": rest, "notes": notes}


DEMO_TRAINING_PLAN = {
    "name": "4-Day Upper/Lower Split",
    "weeks": 4,
    "days": [
        {
            "dayNumber": 1,
            "name": "Upper Body A",
            "exercises": [
                _exercise("Bench Press", 4, "8-10", "90s", "Flat barbell"),
                _exercise("Barbell Row", 4, "8-10", "90s", "Overhand grip"),
                _exercise("Overhead Press", 3, "10-12", "60s", "Standing"),
                _exercise("Lat Pulldown", 3, "10-12", "60s", "Wide grip"),
                _exercise("Dumbbell Curls", 3, "12-15", "45s", "Supinated"),
                _exercise("Tricep Pushdown", 3, "12-15", "45s", "Rope attachment"),
            ],
        },
        {
            "dayNumber": 2,
            "name": "Lower Body A",
            "exercises": [
                _exercise("Squat", 4, "6-8", "2min", "Back squat"),
                _exercise("Romanian Deadlift", 4, "8-10", "90s", "Barbell"),
                _exercise("Leg Press", 3, "10-12", "60s", "Full ROM"),
                _exercise("Leg Curl", 3, "12-15", "60s", "Lying or seated"),
                _exercise("Calf Raises", 4, "15-20", "45s", "Standing"),
            ],
        },
        {
            "dayNumber": 3,
            "name": "Upper Body B",
            "exercises": [
                _exercise("Incline Dumbbell Press", 4, "8-10", "90s", "30-45 degree"),
                _exercise("Pull-ups", 4, "6-10", "90s", "Weighted if possible"),
                _exercise("Cable Flyes", 3, "12-15", "60s", "High to low"),
                _exercise("Face Pulls", 3, "15-20", "45s", "Rope attachment"),
                _exercise("Hammer Curls", 3, "12-15", "45s", "Dumbbells"),
                _exercise("Overhead Tricep Extension", 3, "12-15", "45s", "Dumbbell"),
            ],
        },
        {
            "dayNumber": 4,
            "name": "Lower Body B",
            "exercises": [
                _exercise("Front Squat", 4, "8-10", "2min", "Barbell"),
                _exercise("Deadlift", 4, "6-8", "2min", "Conventional"),
                _exercise("Bulgarian Split Squat", 3, "10-12", "60s", "Per leg"),
                _exercise("Leg Extension", 3, "12-15", "60s", "Control tempo"),
                _exercise("Seated Calf Raises", 4, "15-20", "45s", "Pause at top"),
            ],
        },
    ],
}

DEMO_MEAL_SUGGESTIONS = {
    "mealPlan": [
        {
            "meal": "Breakfast",
            "suggestions": [
                "4 eggs, 2 slices whole wheat toast, 1 banana",
                "Protein oatmeal with berries and peanut butter",
            ],
            "macros": {"protein": 40, "carbs": 60, "fats": 20},
        },
        {
            "meal": "Lunch",
            "suggestions": [
                "Grilled chicken breast, brown rice, mixed vegetables",
                "Beef stir-fry with quinoa",
            ],
            "macros": {"protein": 50, "carbs": 80, "fats": 15},
        },
        {
            "meal": "Dinner",
            "suggestions": [
                "Salmon, sweet potato, broccoli",
                "Chicken thighs, wild rice, green beans",
            ],
            "macros": {"protein": 50, "carbs": 90, "fats": 20},
        },
        {
            "meal": "Snacks",
            "suggestions": [
                "Protein shake with banana",
                "Cottage cheese with berries",
            ],
            "macros": {"protein": 40, "carbs": 120, "fats": 20},
        },
    ],
    "tips": [
        "Drink 3-4 liters of water daily",
        "Time protein intake around workouts",
        "Get 7-9 hours of sleep for recovery",
    ],
}

DEMO_CONVERSATION = [
    (
        MessageRole.USER,
        "Hey Coach! I'm ready to start training. What should I focus on first?",
    ),
    (
        MessageRole.ASSISTANT,
        "Great to have you on board! You're set up with a 4-day upper/lower split "
        "and 2800 kcal with 180g protein. Focus on progressive overload, hit your "
        "protein target daily and stay consistent with your 4 training days. "
        "Your first session is Upper Body A. Let me know how it goes!",
    ),
]


async def seed_demo(session: AsyncSession, username: str, password: str) -> Dict[str, int]:
    """
    Insert the demo account and its data in the given session.

    Returns:
        Counts of created records, or an empty dict if the user already exists
    """
    users = UserRepository(session)
    if await users.get_by_username(username) is not None:
        logger.warning(f"User '{username}' already exists, skipping seed")
        return {}

    user = await users.create(username, hash_password(password), email=f"{username}@fitcoach.app")
    logger.info(f"  ✓ Created user: {user.username} (ID: {user.id})")

    await UserProfileRepository(session).upsert(user.id, DEMO_PROFILE)
    await CoachPersonaRepository(session).upsert(user.id, DEMO_COACH)
    logger.info(f"  ✓ Created profile and coach persona '{DEMO_COACH['name']}'")

    await TrainingPlanRepository(session).replace_active(
        TrainingPlanModel(
            user_id=user.id,
            name=DEMO_TRAINING_PLAN["name"],
            description="Hypertrophy-focused program for intermediate lifters",
            plan=DEMO_TRAINING_PLAN,
        )
    )
    await NutritionPlanRepository(session).replace_active(
        NutritionPlanModel(
            user_id=user.id,
            name="HYPERTROPHY Nutrition Plan",
            calories=2800,
            protein=180,
            carbs=350,
            fats=75,
            meal_suggestions=DEMO_MEAL_SUGGESTIONS,
        )
    )
    logger.info("  ✓ Created active training and nutrition plans")

    now = utcnow()
    workouts = WorkoutRepository(session)
    await workouts.add(
        WorkoutSessionModel(
            user_id=user.id,
            name="Upper Body A",
            date=now - timedelta(days=7),
            duration=65,
            notes="Great session, hit new PR on bench",
            exercises=[
                {"name": "Bench Press", "sets": 4, "reps": 8, "weight": 100},
                {"name": "Barbell Row", "sets": 4, "reps": 10, "weight": 85},
                {"name": "Overhead Press", "sets": 3, "reps": 12, "weight": 50},
            ],
        )
    )
    await workouts.add(
        WorkoutSessionModel(
            user_id=user.id,
            name="Lower Body A",
            date=now - timedelta(days=3),
            duration=70,
            notes="Tough leg day, felt the burn",
            exercises=[
                {"name": "Squat", "sets": 4, "reps": 8, "weight": 120},
                {"name": "Romanian Deadlift", "sets": 4, "reps": 10, "weight": 100},
                {"name": "Leg Press", "sets": 3, "reps": 12, "weight": 200},
            ],
        )
    )

    progress = ProgressRepository(session)
    weigh_ins = [
        (14, 79.5, "Starting point"),
        (7, 79.8, "Up slightly, eating in surplus"),
        (0, 80.2, "Gaining steadily, feeling strong"),
    ]
    for days_ago, weight, notes in weigh_ins:
        await progress.add(
            ProgressLogModel(
                user_id=user.id,
                date=now - timedelta(days=days_ago),
                weight=weight,
                notes=notes,
            )
        )
    logger.info(f"  ✓ Logged 2 workouts and {len(weigh_ins)} weigh-ins")

    chat = ChatService(session)
    thread = await chat.create_thread(user.id, "Getting Started")
    for role, content in DEMO_CONVERSATION:
        await chat.append_message(thread, role, content)
    logger.info(f"  ✓ Created chat thread with {len(DEMO_CONVERSATION)} messages")

    return {
        "users": 1,
        "workouts": 2,
        "progress_logs": len(weigh_ins),
        "chat_messages": len(DEMO_CONVERSATION),
    }


async def main():
    parser = argparse.ArgumentParser(description="Seed the database with a demo account")
    parser.add_argument("--username", default="demo", help="Demo username (default: demo)")
    parser.add_argument("--password", default="demo123", help="Demo password (default: demo123)")
    args = parser.parse_args()

    await init_db()
    try:
        async with get_session_context() as session:
            stats = await seed_demo(session, args.username, args.password)
    finally:
        await close_db()

    if not stats:
        return

    print("\n=== Seed Complete ===")
    print(f"Username: {args.username}")
    print(f"Password: {args.password}")
    print(f"Records: {stats}")


if __name__ == "__main__":
    asyncio.run(main())
