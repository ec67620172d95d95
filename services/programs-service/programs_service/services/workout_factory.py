import re
from dataclasses import dataclass
from datetime import date

import structlog

from ..models import UserProgram, Workout, WorkoutExercise
from ..models.enums import CreationType, ExerciseCategory, WorkoutGoal, WorkoutStatus, WorkoutType
from ..schemas.program import ProgramTemplateBase, ProgramWorkoutDefinition
from .exercise_catalog import ExerciseCatalog

logger = structlog.get_logger(__name__)

DEFAULT_TARGET_REPS = 10

CATEGORY_GOALS = {
    ExerciseCategory.strength: WorkoutGoal.strength,
    ExerciseCategory.calisthenics: WorkoutGoal.strength,
    ExerciseCategory.cardio: WorkoutGoal.cardio,
    ExerciseCategory.running: WorkoutGoal.cardio,
    ExerciseCategory.cycling: WorkoutGoal.cardio,
    ExerciseCategory.swimming: WorkoutGoal.cardio,
    ExerciseCategory.yoga: WorkoutGoal.flexibility,
    ExerciseCategory.pilates: WorkoutGoal.flexibility,
    ExerciseCategory.stretching: WorkoutGoal.flexibility,
    ExerciseCategory.hiit: WorkoutGoal.fat_loss,
}

_NON_NUMERIC = re.compile(r"[^0-9.]")


def parse_reps(reps: str | None) -> int:
    """'10' -> 10, '8-12' -> 8 (low end of the range), anything else -> 10."""
    if reps is None:
        return DEFAULT_TARGET_REPS
    text = reps.strip()
    try:
        return int(text)
    except ValueError:
        pass
    if "-" in text:
        try:
            return int(text.split("-", 1)[0].strip())
        except ValueError:
            return DEFAULT_TARGET_REPS
    return DEFAULT_TARGET_REPS


def parse_weight(weight: str | None) -> float | None:
    """Numeric part of a free-text weight: '135 lbs' -> 135.0, 'Bodyweight' -> None."""
    if not weight:
        return None
    digits = _NON_NUMERIC.sub("", weight)
    if not digits:
        return None
    try:
        return float(digits)
    except ValueError:
        return None


def goal_for_category(category: str) -> WorkoutGoal:
    try:
        return CATEGORY_GOALS.get(ExerciseCategory(category), WorkoutGoal.general)
    except ValueError:
        return WorkoutGoal.general


@dataclass(frozen=True)
class ProgramContext:
    """Everything about an enrollment a generated workout gets stamped with."""

    user_id: str
    user_program_id: int
    program_name: str
    category: str
    difficulty: str
    duration_weeks: int
    workouts_per_week: int

    @property
    def total_sessions(self) -> int:
        return self.duration_weeks * self.workouts_per_week

    @classmethod
    def for_enrollment(cls, user_program: UserProgram, blueprint: ProgramTemplateBase) -> "ProgramContext":
        return cls(
            user_id=user_program.user_id,
            user_program_id=user_program.id,
            program_name=blueprint.name,
            category=blueprint.category.value,
            difficulty=blueprint.difficulty.value,
            duration_weeks=blueprint.duration_weeks,
            workouts_per_week=blueprint.workouts_per_week,
        )


class WorkoutInstanceFactory:
    def __init__(self, catalog: ExerciseCatalog):
        self.catalog = catalog

    async def build(
        self,
        definition: ProgramWorkoutDefinition,
        context: ProgramContext,
        *,
        week_number: int,
        day_number: int,
        session_number: int,
        scheduled_date: date,
        is_active: bool = False,
    ) -> Workout:
        workout = Workout(
            user_id=context.user_id,
            name=definition.name,
            description=definition.description,
            estimated_duration=definition.estimated_minutes,
            difficulty=context.difficulty,
            goal=goal_for_category(context.category).value,
            creation_type=CreationType.preset.value,
            workout_type=WorkoutType.program_session.value,
            status=WorkoutStatus.scheduled.value,
            is_active=is_active,
            scheduled_date=scheduled_date,
            source_program_id=context.user_program_id,
            source_program_name=context.program_name,
            program_week_number=week_number,
            program_day_number=day_number,
            program_session_number=session_number,
            total_weeks=context.duration_weeks,
            total_days=context.workouts_per_week,
            total_sessions=context.total_sessions,
        )

        for order_index, exercise_def in enumerate(definition.exercises):
            exercise = await self.catalog.upsert_or_create(
                exercise_def.exercise_name,
                category=context.category,
                difficulty=context.difficulty,
            )
            workout.exercises.append(
                WorkoutExercise(
                    exercise=exercise,
                    order_index=order_index,
                    target_sets=exercise_def.sets,
                    target_reps=parse_reps(exercise_def.reps),
                    target_weight=parse_weight(exercise_def.weight),
                    rest_seconds=exercise_def.rest_seconds,
                    notes=exercise_def.notes,
                )
            )

        logger.debug(
            "program_workout_built",
            user_program_id=context.user_program_id,
            session_number=session_number,
            exercises=len(definition.exercises),
        )
        return workout
