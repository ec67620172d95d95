import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import WorkoutNotFoundException
from ..models import UserProgram, Workout
from ..models.enums import ProgramStatus, WorkoutStatus

logger = structlog.get_logger(__name__)

_FINISHED = (WorkoutStatus.completed.value, WorkoutStatus.deleted.value)


async def clear_active_workouts(db: AsyncSession, user_id: str, *, keep_id: int | None = None) -> int:
    """Drop the active flag from every workout of ``user_id`` except ``keep_id``."""
    result = await db.execute(select(Workout).where(Workout.user_id == user_id, Workout.is_active.is_(True)))
    cleared = 0
    for workout in result.scalars().all():
        if workout.id == keep_id:
            continue
        workout.is_active = False
        cleared += 1
    return cleared


class ActiveWorkoutService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def get_workout(self, workout_id: int) -> Workout:
        result = await self.db.execute(
            select(Workout).where(
                Workout.id == workout_id,
                Workout.user_id == self.user_id,
                Workout.status != WorkoutStatus.deleted.value,
            )
        )
        workout = result.scalars().first()
        if workout is None:
            raise WorkoutNotFoundException(workout_id)
        return workout

    async def activate(self, workout: Workout) -> Workout:
        """Make ``workout`` the single active workout. Does not commit."""
        await clear_active_workouts(self.db, self.user_id, keep_id=workout.id)
        workout.is_active = True
        return workout

    async def set_active_workout(self, workout_id: int) -> Workout:
        workout = await self.get_workout(workout_id)
        await self.activate(workout)
        await self.db.commit()
        logger.info("active_workout_set", user_id=self.user_id, workout_id=workout.id)
        return workout

    async def current_workout(self) -> Workout | None:
        """The workout the user should do now.

        Preference order: the flagged active workout, then the first
        incomplete session of the active program, then the newest workout
        that is neither completed nor deleted.
        """
        result = await self.db.execute(
            select(Workout)
            .where(
                Workout.user_id == self.user_id,
                Workout.is_active.is_(True),
                Workout.status != WorkoutStatus.deleted.value,
            )
            .order_by(Workout.id)
        )
        active = result.scalars().first()
        if active is not None:
            return active

        result = await self.db.execute(
            select(Workout)
            .join(UserProgram, Workout.source_program_id == UserProgram.id)
            .where(
                Workout.user_id == self.user_id,
                UserProgram.status == ProgramStatus.active.value,
                Workout.status.not_in(_FINISHED),
            )
            .order_by(Workout.program_session_number)
        )
        next_session = result.scalars().first()
        if next_session is not None:
            return next_session

        result = await self.db.execute(
            select(Workout)
            .where(Workout.user_id == self.user_id, Workout.status.not_in(_FINISHED))
            .order_by(Workout.created_at.desc(), Workout.id.desc())
        )
        return result.scalars().first()

    async def next_program_session(self, workout: Workout) -> Workout | None:
        if not workout.is_program_session:
            return None
        result = await self.db.execute(
            select(Workout)
            .where(
                Workout.user_id == self.user_id,
                Workout.source_program_id == workout.source_program_id,
                Workout.program_session_number > (workout.program_session_number or 0),
                Workout.status.not_in(_FINISHED),
            )
            .order_by(Workout.program_session_number)
        )
        return result.scalars().first()

    async def advance_to_next_workout(self, workout: Workout) -> Workout | None:
        """Activate the program session after ``workout``, if any. Does not commit."""
        upcoming = await self.next_program_session(workout)
        if upcoming is None:
            workout.is_active = False
            return None
        await self.activate(upcoming)
        logger.info(
            "program_advanced_to_next_workout",
            user_id=self.user_id,
            completed_workout_id=workout.id,
            next_workout_id=upcoming.id,
            session_number=upcoming.program_session_number,
        )
        return upcoming
