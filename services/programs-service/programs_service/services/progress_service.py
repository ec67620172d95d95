from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import utcnow
from ..exceptions import UserProgramNotFoundException
from ..models import UserProgram, Workout, week_key
from ..models.enums import ProgramStatus, WorkoutStatus

logger = structlog.get_logger(__name__)


def _ratio(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return min(1.0, max(0.0, part / whole))


@dataclass
class ProgramProgress:
    user_program_id: int
    status: str
    total_workouts: int
    completed_workouts: int
    overall_progress: float
    current_week: int
    current_day: int
    workouts_this_week: int
    week_progress: float
    completed_days_by_week: dict[int, list[int]] = field(default_factory=dict)
    current_streak: int = 0
    best_streak: int = 0
    days_remaining: int = 0
    next_workout_id: int | None = None


def completed_days_by_week(completed_days: dict | None) -> dict[int, list[int]]:
    by_week: dict[int, list[int]] = {}
    for key, days in (completed_days or {}).items():
        if not key.startswith("week"):
            continue
        try:
            week = int(key[len("week") :])
        except ValueError:
            continue
        by_week[week] = sorted(set(days))
    return dict(sorted(by_week.items()))


def session_streaks(sessions: Iterable[Workout], today: date) -> tuple[int, int]:
    """(current, best) runs of completed sessions in session order.

    A session whose date has passed without completion breaks the run;
    sessions still ahead of ``today`` neither extend nor break it.
    """
    current = best = 0
    for workout in sessions:
        if workout.status == WorkoutStatus.completed.value:
            current += 1
            best = max(best, current)
        elif workout.scheduled_date is not None and workout.scheduled_date < today:
            current = 0
    return current, best


def compute_progress(program: UserProgram, template, workouts: Iterable[Workout], today: date) -> ProgramProgress:
    """Derive the progress read-model for one enrollment.

    ``template`` needs ``duration_weeks`` and ``workouts_per_week``;
    ``workouts`` are the sessions generated for ``program``.
    """
    total = template.duration_weeks * template.workouts_per_week
    this_week = len((program.completed_days or {}).get(week_key(program.current_week), []))

    sessions = sorted(
        (w for w in workouts if w.status != WorkoutStatus.deleted.value),
        key=lambda w: w.program_session_number or 0,
    )
    current_streak, best_streak = session_streaks(sessions, today)
    next_workout = next((w for w in sessions if w.status != WorkoutStatus.completed.value), None)

    days_remaining = 0
    if program.status == ProgramStatus.active.value and program.target_end_date is not None:
        days_remaining = max(0, (program.target_end_date - today).days)

    return ProgramProgress(
        user_program_id=program.id,
        status=program.status,
        total_workouts=total,
        completed_workouts=program.completed_workouts,
        overall_progress=_ratio(program.completed_workouts, total),
        current_week=program.current_week,
        current_day=program.current_day,
        workouts_this_week=this_week,
        week_progress=_ratio(this_week, template.workouts_per_week),
        completed_days_by_week=completed_days_by_week(program.completed_days),
        current_streak=current_streak,
        best_streak=best_streak,
        days_remaining=days_remaining,
        next_workout_id=next_workout.id if next_workout is not None else None,
    )


@dataclass
class CompletionUpdate:
    user_program: UserProgram
    counted: bool
    program_completed: bool = False


class ProgramProgressService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def get_user_program(self, user_program_id: int) -> UserProgram:
        result = await self.db.execute(
            select(UserProgram).where(UserProgram.id == user_program_id, UserProgram.user_id == self.user_id)
        )
        program = result.scalars().first()
        if program is None:
            raise UserProgramNotFoundException(user_program_id)
        return program

    async def program_sessions(self, user_program_id: int) -> list[Workout]:
        result = await self.db.execute(
            select(Workout)
            .where(Workout.source_program_id == user_program_id, Workout.user_id == self.user_id)
            .order_by(Workout.program_session_number)
        )
        return list(result.scalars().all())

    async def get_progress(self, user_program_id: int, today: date | None = None) -> ProgramProgress:
        program = await self.get_user_program(user_program_id)
        workouts = await self.program_sessions(program.id)
        return compute_progress(program, program.template, workouts, today or utcnow().date())

    async def record_completion(self, workout: Workout) -> CompletionUpdate | None:
        """Count a completed program session against its enrollment. Does not commit.

        Each (week, day) counts once. Completed or queued enrollments are left
        untouched. When no session remains the enrollment is completed.
        """
        if not workout.is_program_session:
            return None
        program = await self.get_user_program(workout.source_program_id)
        if not program.is_active:
            logger.info(
                "program_completion_ignored",
                user_program_id=program.id,
                workout_id=workout.id,
                status=program.status,
            )
            return CompletionUpdate(user_program=program, counted=False)

        week = workout.program_week_number or program.current_week
        day = workout.program_day_number or program.current_day
        if program.is_day_completed(week, day):
            return CompletionUpdate(user_program=program, counted=False)

        program.completed_workouts += 1
        program.mark_day_completed(week, day)

        remaining = [
            w
            for w in await self.program_sessions(program.id)
            if w.id != workout.id and w.status not in (WorkoutStatus.completed.value, WorkoutStatus.deleted.value)
        ]
        if remaining:
            upcoming = remaining[0]
            program.current_week = upcoming.program_week_number or program.current_week
            program.current_day = upcoming.program_day_number or program.current_day
            finished = False
        else:
            program.status = ProgramStatus.completed.value
            program.end_date = utcnow()
            finished = True

        logger.info(
            "program_workout_recorded",
            user_program_id=program.id,
            workout_id=workout.id,
            completed_workouts=program.completed_workouts,
            week=week,
            day=day,
            program_completed=finished,
        )
        return CompletionUpdate(user_program=program, counted=True, program_completed=finished)
