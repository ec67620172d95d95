from dataclasses import dataclass
from datetime import date

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import utcnow
from ..exceptions import (
    ActiveProgramConflictException,
    InvalidStateException,
    TemplateNotFoundException,
    UserProgramNotFoundException,
)
from ..metrics import (
    PROGRAM_ENROLLMENT_FAILURES_TOTAL,
    PROGRAM_ENROLLMENTS_TOTAL,
    PROGRAM_WORKOUTS_GENERATED_TOTAL,
)
from ..models import ProgramTemplate, UserProgram, Workout, WorkoutSession
from ..models.enums import ProgramStatus, SessionStatus, WorkoutStatus
from ..schemas.program import ProgramTemplateBase
from .active_workout_service import clear_active_workouts
from .exercise_catalog import ExerciseCatalog
from .program_events import ProgramChanged, ProgramEventBus, program_events
from .schedule_expander import ScheduledEntry, expand_schedule, load_blueprint
from .workout_factory import ProgramContext, WorkoutInstanceFactory

logger = structlog.get_logger(__name__)


@dataclass
class EnrollmentResult:
    success: bool
    user_program: UserProgram | None = None
    workouts_created: int = 0
    replaced_program_id: int | None = None
    error: str | None = None


class EnrollmentCoordinator:
    """Turns a program template into a live enrollment with dated workouts.

    An enrollment either lands completely (program row, every generated
    workout, the replaced program's retirement) or not at all.
    """

    def __init__(self, db: AsyncSession, user_id: str, events: ProgramEventBus | None = None):
        self.db = db
        self.user_id = user_id
        self.events = events or program_events

    async def get_template(self, template_id: int) -> ProgramTemplate:
        template = await self.db.get(ProgramTemplate, template_id)
        if template is None:
            raise TemplateNotFoundException(template_id)
        return template

    async def get_user_program(self, user_program_id: int) -> UserProgram:
        result = await self.db.execute(
            select(UserProgram).where(UserProgram.id == user_program_id, UserProgram.user_id == self.user_id)
        )
        program = result.scalars().first()
        if program is None:
            raise UserProgramNotFoundException(user_program_id)
        return program

    async def get_active_program(self) -> UserProgram | None:
        result = await self.db.execute(
            select(UserProgram)
            .where(UserProgram.user_id == self.user_id, UserProgram.status == ProgramStatus.active.value)
            .order_by(UserProgram.id.desc())
        )
        return result.scalars().first()

    async def list_programs(self, status: str | None = None) -> list[UserProgram]:
        stmt = select(UserProgram).where(UserProgram.user_id == self.user_id)
        if status:
            stmt = stmt.where(UserProgram.status == status)
        result = await self.db.execute(stmt.order_by(UserProgram.created_at.desc(), UserProgram.id.desc()))
        return list(result.scalars().all())

    async def enroll(
        self,
        template: ProgramTemplate,
        start_date: date,
        replacing: UserProgram | None = None,
    ) -> EnrollmentResult:
        user_program = UserProgram(
            user_id=self.user_id,
            template_id=template.id,
            status=ProgramStatus.queued.value,
            completed_days={},
        )
        user_program.template = template
        return await self._materialize(template, user_program, start_date, replacing, reason="enrolled")

    async def enroll_by_id(self, template_id: int, start_date: date, replace_active: bool = False) -> EnrollmentResult:
        template = await self.get_template(template_id)
        replacing = await self.get_active_program() if replace_active else None
        return await self.enroll(template, start_date, replacing=replacing)

    async def queue(self, template_id: int, notes: str | None = None) -> UserProgram:
        """Save an enrollment for later; nothing is scheduled until it is started."""
        template = await self.get_template(template_id)
        load_blueprint(template)
        user_program = UserProgram(
            user_id=self.user_id,
            template_id=template.id,
            status=ProgramStatus.queued.value,
            completed_days={},
            notes=notes,
        )
        user_program.template = template
        self.db.add(user_program)
        await self.db.commit()
        PROGRAM_ENROLLMENTS_TOTAL.labels(mode="queued").inc()
        logger.info("program_queued", user_id=self.user_id, user_program_id=user_program.id, template_id=template.id)
        return user_program

    async def start_queued(
        self,
        user_program_id: int,
        start_date: date,
        replace_active: bool = False,
    ) -> EnrollmentResult:
        user_program = await self.get_user_program(user_program_id)
        if user_program.status != ProgramStatus.queued.value:
            raise InvalidStateException(
                detail=f"Program enrollment id={user_program_id} is {user_program.status}, only queued ones can start"
            )
        replacing = await self.get_active_program() if replace_active else None
        return await self._materialize(
            user_program.template, user_program, start_date, replacing, reason="started"
        )

    async def end_program(self, user_program_id: int) -> UserProgram:
        user_program = await self.get_user_program(user_program_id)
        if not user_program.is_active:
            raise InvalidStateException(
                detail=f"Program enrollment id={user_program_id} is {user_program.status}, not active"
            )
        cancelled = await self._retire(user_program)
        await self.db.commit()
        logger.info(
            "program_ended",
            user_id=self.user_id,
            user_program_id=user_program.id,
            workouts_cancelled=cancelled,
        )
        await self.events.publish(
            ProgramChanged(user_id=self.user_id, user_program_id=user_program.id, reason="ended")
        )
        return user_program

    async def _retire(self, user_program: UserProgram) -> int:
        """Complete ``user_program`` and cancel its outstanding sessions. Does not commit."""
        user_program.status = ProgramStatus.completed.value
        user_program.end_date = utcnow()
        result = await self.db.execute(
            select(Workout).where(
                Workout.source_program_id == user_program.id,
                Workout.status.not_in((WorkoutStatus.completed.value, WorkoutStatus.deleted.value)),
            )
        )
        workouts = list(result.scalars().all())
        for workout in workouts:
            workout.status = WorkoutStatus.deleted.value
            workout.is_active = False

        if workouts:
            open_sessions = await self.db.execute(
                select(WorkoutSession).where(
                    WorkoutSession.workout_id.in_([w.id for w in workouts]),
                    WorkoutSession.status.in_((SessionStatus.in_progress.value, SessionStatus.paused.value)),
                )
            )
            for session in open_sessions.scalars().all():
                session.status = SessionStatus.cancelled.value
                session.completed_at = user_program.end_date
                session.paused_at = None
        return len(workouts)

    async def _materialize(
        self,
        template: ProgramTemplate,
        user_program: UserProgram,
        start_date: date,
        replacing: UserProgram | None,
        *,
        reason: str,
    ) -> EnrollmentResult:
        template_id = template.id
        blueprint = load_blueprint(template)
        entries = expand_schedule(blueprint, start_date)

        active = await self.get_active_program()
        if active is not None and (replacing is None or replacing.id != active.id):
            raise ActiveProgramConflictException(active.id)
        if replacing is not None and not replacing.is_active:
            raise InvalidStateException(detail=f"Program enrollment id={replacing.id} is not active")

        try:
            if replacing is not None:
                cancelled = await self._retire(replacing)
                logger.info(
                    "program_replaced",
                    user_id=self.user_id,
                    replaced_program_id=replacing.id,
                    workouts_cancelled=cancelled,
                )

            user_program.status = ProgramStatus.active.value
            user_program.schedule_from(start_date, blueprint.duration_weeks)
            user_program.current_week = 1
            user_program.current_day = 1
            user_program.completed_workouts = 0
            user_program.completed_days = {}
            self.db.add(user_program)
            await self.db.flush()

            await clear_active_workouts(self.db, self.user_id)
            created = await self._generate_workouts(user_program, blueprint, entries)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            PROGRAM_ENROLLMENT_FAILURES_TOTAL.inc()
            logger.exception(
                "program_enrollment_failed",
                user_id=self.user_id,
                template_id=template_id,
                error=str(exc),
            )
            return EnrollmentResult(success=False, error=f"Failed to save enrollment: {exc.__class__.__name__}")

        mode = "replace" if replacing is not None else "new"
        PROGRAM_ENROLLMENTS_TOTAL.labels(mode=mode).inc()
        PROGRAM_WORKOUTS_GENERATED_TOTAL.inc(created)
        logger.info(
            "program_enrolled",
            user_id=self.user_id,
            user_program_id=user_program.id,
            template_id=template_id,
            start_date=start_date.isoformat(),
            workouts_created=created,
            replaced_program_id=replacing.id if replacing is not None else None,
        )

        if replacing is not None:
            reason = "replaced"
        await self.events.publish(ProgramChanged(user_id=self.user_id, user_program_id=user_program.id, reason=reason))
        return EnrollmentResult(
            success=True,
            user_program=user_program,
            workouts_created=created,
            replaced_program_id=replacing.id if replacing is not None else None,
        )

    async def _generate_workouts(
        self,
        user_program: UserProgram,
        blueprint: ProgramTemplateBase,
        entries: list[ScheduledEntry],
    ) -> int:
        factory = WorkoutInstanceFactory(ExerciseCatalog(self.db))
        context = ProgramContext.for_enrollment(user_program, blueprint)
        session_number = 0
        for entry in entries:
            definition = blueprint.definition_named(entry.workout_name)
            session_number += 1
            workout = await factory.build(
                definition,
                context,
                week_number=entry.week_number,
                day_number=entry.day_of_week,
                session_number=session_number,
                scheduled_date=entry.scheduled_date,
                is_active=False,
            )
            self.db.add(workout)
        return session_number
