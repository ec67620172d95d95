from datetime import date

import pytest
from sqlalchemy import func, select

from programs_service.models import Exercise
from programs_service.models.enums import WorkoutGoal
from programs_service.schemas.program import ProgramWorkoutDefinition
from programs_service.services.exercise_catalog import ExerciseCatalog
from programs_service.services.workout_factory import (
    ProgramContext,
    WorkoutInstanceFactory,
    goal_for_category,
    parse_reps,
    parse_weight,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10", 10),
        (" 12 ", 12),
        ("8-12", 8),
        ("6 - 8", 6),
        ("AMRAP", 10),
        ("to failure", 10),
        ("x-5", 10),
        (None, 10),
    ],
)
def test_parse_reps(raw, expected):
    assert parse_reps(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("135 lbs", 135.0),
        ("22.5kg", 22.5),
        ("RPE 7", 7.0),
        ("Bodyweight", None),
        ("", None),
        (None, None),
        ("1.2.3", None),
    ],
)
def test_parse_weight(raw, expected):
    assert parse_weight(raw) == expected


@pytest.mark.parametrize(
    "category, goal",
    [
        ("strength", WorkoutGoal.strength),
        ("calisthenics", WorkoutGoal.strength),
        ("running", WorkoutGoal.cardio),
        ("swimming", WorkoutGoal.cardio),
        ("pilates", WorkoutGoal.flexibility),
        ("hiit", WorkoutGoal.fat_loss),
        ("unknown", WorkoutGoal.general),
    ],
)
def test_goal_for_category(category, goal):
    assert goal_for_category(category) == goal


def _context(**overrides) -> ProgramContext:
    values = dict(
        user_id="user-1",
        user_program_id=41,
        program_name="Push Pull Legs",
        category="strength",
        difficulty="advanced",
        duration_weeks=12,
        workouts_per_week=6,
    )
    values.update(overrides)
    return ProgramContext(**values)


@pytest.mark.asyncio
async def test_build_stamps_program_tracking_fields(db):
    definition = ProgramWorkoutDefinition(
        name="Push",
        description="Chest, shoulders, triceps",
        estimated_minutes=60,
        exercises=[
            {"exercise_name": "Bench Press", "sets": 4, "reps": "8-12", "weight": "135 lbs", "rest_seconds": 120},
            {"exercise_name": "Dips", "reps": "AMRAP", "weight": "Bodyweight"},
        ],
    )
    factory = WorkoutInstanceFactory(ExerciseCatalog(db))

    workout = await factory.build(
        definition,
        _context(),
        week_number=3,
        day_number=4,
        session_number=16,
        scheduled_date=date(2024, 1, 18),
    )

    assert workout.name == "Push"
    assert workout.creation_type == "preset"
    assert workout.workout_type == "program_session"
    assert workout.goal == "strength"
    assert workout.difficulty == "advanced"
    assert workout.is_active is False
    assert workout.scheduled_date == date(2024, 1, 18)
    assert workout.source_program_id == 41
    assert workout.source_program_name == "Push Pull Legs"
    assert (workout.program_week_number, workout.program_day_number, workout.program_session_number) == (3, 4, 16)
    assert (workout.total_weeks, workout.total_days, workout.total_sessions) == (12, 6, 72)

    first, second = workout.exercises
    assert (first.order_index, first.target_sets, first.target_reps, first.target_weight) == (0, 4, 8, 135.0)
    assert first.rest_seconds == 120
    assert first.exercise.name == "Bench Press"
    assert (second.order_index, second.target_reps, second.target_weight) == (1, 10, None)


@pytest.mark.asyncio
async def test_catalog_match_is_case_insensitive_and_misses_are_created_once(db):
    db.add(Exercise(name="Bench Press", muscle_group="chest", category="strength", equipment="barbell"))
    await db.flush()

    definition = ProgramWorkoutDefinition(
        name="Push",
        exercises=[
            {"exercise_name": "bench press"},
            {"exercise_name": "Cable Fly"},
            {"exercise_name": "cable fly"},
        ],
    )
    factory = WorkoutInstanceFactory(ExerciseCatalog(db))

    workout = await factory.build(
        definition,
        _context(category="calisthenics", difficulty="beginner"),
        week_number=1,
        day_number=1,
        session_number=1,
        scheduled_date=date(2024, 1, 1),
    )

    existing, fly, fly_again = (item.exercise for item in workout.exercises)
    assert existing.muscle_group == "chest"
    assert fly is fly_again
    assert fly.id is not None
    assert (fly.muscle_group, fly.category, fly.difficulty) == ("full_body", "calisthenics", "beginner")

    count = await db.scalar(select(func.count()).select_from(Exercise).where(func.lower(Exercise.name) == "cable fly"))
    assert count == 1
