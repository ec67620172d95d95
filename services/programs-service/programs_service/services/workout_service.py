import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Workout, WorkoutExercise
from ..models.enums import CreationType, WorkoutStatus, WorkoutType
from ..schemas.workout import WorkoutCreate
from .active_workout_service import ActiveWorkoutService
from .exercise_catalog import ExerciseCatalog

logger = structlog.get_logger(__name__)


class WorkoutService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.active = ActiveWorkoutService(db, user_id)

    async def list_workouts(
        self,
        *,
        status: str | None = None,
        program_id: int | None = None,
        include_deleted: bool = False,
    ) -> list[Workout]:
        stmt = select(Workout).where(Workout.user_id == self.user_id)
        if status:
            stmt = stmt.where(Workout.status == status)
        elif not include_deleted:
            stmt = stmt.where(Workout.status != WorkoutStatus.deleted.value)
        if program_id is not None:
            stmt = stmt.where(Workout.source_program_id == program_id).order_by(Workout.program_session_number)
        else:
            stmt = stmt.order_by(Workout.scheduled_date.is_(None), Workout.scheduled_date, Workout.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_workout(self, workout_id: int) -> Workout:
        return await self.active.get_workout(workout_id)

    async def create_custom_workout(self, payload: WorkoutCreate) -> Workout:
        catalog = ExerciseCatalog(self.db)
        workout = Workout(
            user_id=self.user_id,
            name=payload.name,
            description=payload.description,
            estimated_duration=payload.estimated_duration,
            difficulty=payload.difficulty.value,
            goal=payload.goal.value,
            creation_type=CreationType.custom.value,
            workout_type=WorkoutType.standalone.value,
            status=WorkoutStatus.scheduled.value,
            is_active=False,
            scheduled_date=payload.scheduled_date,
            exercises=[],
        )
        for order_index, item in enumerate(payload.exercises):
            exercise = await catalog.get_exercise(item.exercise_id)
            workout.exercises.append(
                WorkoutExercise(
                    exercise=exercise,
                    order_index=order_index,
                    target_sets=item.target_sets,
                    target_reps=item.target_reps,
                    target_weight=item.target_weight,
                    rest_seconds=item.rest_seconds,
                    notes=item.notes,
                )
            )
        self.db.add(workout)
        await self.db.commit()
        logger.info(
            "custom_workout_created",
            user_id=self.user_id,
            workout_id=workout.id,
            exercises=len(payload.exercises),
        )
        return workout

    async def delete_workout(self, workout_id: int) -> None:
        """Soft delete; the row stays so session history keeps its workout."""
        workout = await self.get_workout(workout_id)
        workout.status = WorkoutStatus.deleted.value
        workout.is_active = False
        await self.db.commit()
        logger.info("workout_deleted", user_id=self.user_id, workout_id=workout_id)
