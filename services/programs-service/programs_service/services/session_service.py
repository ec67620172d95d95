import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import utcnow
from ..exceptions import InvalidStateException, SessionNotFoundException
from ..metrics import WORKOUT_SESSIONS_COMPLETED_TOTAL, WORKOUT_SESSIONS_STARTED_TOTAL
from ..models import CompletedSet, Workout, WorkoutExercise, WorkoutSession
from ..models.enums import SessionStatus, WorkoutStatus
from ..schemas.session import CompletedSetCreate, SessionCompleteRequest
from ..schemas.watch import ExerciseChanged, RestTimerEnded, RestTimerStarted, WorkoutEnded, WorkoutStarted
from .active_workout_service import ActiveWorkoutService
from .personal_records import PersonalRecordService
from .program_events import ProgramChanged, ProgramEventBus, program_events
from .progress_service import ProgramProgressService
from .watch_relay import WatchRelay, watch_relay

logger = structlog.get_logger(__name__)

_OPEN = (SessionStatus.in_progress.value, SessionStatus.paused.value)


def _following(workout: Workout, current: WorkoutExercise, set_number: int) -> tuple[WorkoutExercise, int] | None:
    """The (exercise, set) that comes after ``set_number`` of ``current``, or None at the end."""
    if set_number < current.target_sets:
        return current, set_number + 1
    later = [item for item in workout.exercises if item.order_index > current.order_index]
    return (later[0], 1) if later else None


def _exercise_changed(workout_exercise: WorkoutExercise, set_number: int) -> ExerciseChanged:
    return ExerciseChanged(
        exercise=workout_exercise.exercise.name,
        set_number=set_number,
        total_sets=workout_exercise.target_sets,
        target_weight=workout_exercise.target_weight,
        target_reps=workout_exercise.target_reps,
    )


class SessionService:
    def __init__(
        self,
        db: AsyncSession,
        user_id: str,
        relay: WatchRelay | None = None,
        events: ProgramEventBus | None = None,
    ):
        self.db = db
        self.user_id = user_id
        self.relay = relay or watch_relay
        self.events = events or program_events
        self.active = ActiveWorkoutService(db, user_id)
        self.progress = ProgramProgressService(db, user_id)
        self.records = PersonalRecordService(db, user_id)

    async def get_session(self, session_id: int) -> WorkoutSession:
        result = await self.db.execute(
            select(WorkoutSession).where(WorkoutSession.id == session_id, WorkoutSession.user_id == self.user_id)
        )
        session = result.scalars().first()
        if session is None:
            raise SessionNotFoundException(session_id)
        return session

    async def _open_session(self, session_id: int) -> WorkoutSession:
        session = await self.get_session(session_id)
        if not session.is_open:
            raise InvalidStateException(detail=f"Session id={session_id} is already {session.status}")
        return session

    async def open_session_for(self, workout_id: int) -> WorkoutSession | None:
        result = await self.db.execute(
            select(WorkoutSession)
            .where(
                WorkoutSession.workout_id == workout_id,
                WorkoutSession.user_id == self.user_id,
                WorkoutSession.status.in_(_OPEN),
            )
            .order_by(WorkoutSession.id.desc())
        )
        return result.scalars().first()

    async def open_session_elsewhere(self, workout_id: int) -> WorkoutSession | None:
        result = await self.db.execute(
            select(WorkoutSession)
            .where(
                WorkoutSession.user_id == self.user_id,
                WorkoutSession.workout_id != workout_id,
                WorkoutSession.status.in_(_OPEN),
            )
            .order_by(WorkoutSession.id.desc())
        )
        return result.scalars().first()

    async def start_session(self, workout_id: int) -> WorkoutSession:
        workout = await self.active.get_workout(workout_id)
        if workout.status == WorkoutStatus.completed.value:
            raise InvalidStateException(detail=f"Workout id={workout_id} is already completed")

        existing = await self.open_session_for(workout.id)
        if existing is not None:
            return existing

        # One workout in progress per user
        other = await self.open_session_elsewhere(workout.id)
        if other is not None:
            raise InvalidStateException(
                detail=f"Session id={other.id} for workout id={other.workout_id} is still open; "
                "complete or cancel it first"
            )

        await self.active.activate(workout)
        workout.status = WorkoutStatus.active.value
        session = WorkoutSession(
            user_id=self.user_id,
            workout_id=workout.id,
            user_program_id=workout.source_program_id,
            status=SessionStatus.in_progress.value,
            started_at=utcnow(),
            paused_seconds=0,
            completed_sets=[],
            personal_records=[],
        )
        session.workout = workout
        self.db.add(session)
        await self.db.commit()

        WORKOUT_SESSIONS_STARTED_TOTAL.inc()
        logger.info("workout_session_started", user_id=self.user_id, session_id=session.id, workout_id=workout.id)

        first = workout.exercises[0] if workout.exercises else None
        self.relay.send(
            self.user_id,
            WorkoutStarted(
                workout_name=workout.name,
                exercise=first.exercise.name if first is not None else None,
                total_sets=first.target_sets if first is not None else 0,
            ),
        )
        return session

    async def pause_session(self, session_id: int) -> WorkoutSession:
        session = await self._open_session(session_id)
        if session.status == SessionStatus.paused.value:
            return session
        session.status = SessionStatus.paused.value
        session.paused_at = utcnow()
        await self.db.commit()
        logger.info("workout_session_paused", user_id=self.user_id, session_id=session.id)
        return session

    async def resume_session(self, session_id: int) -> WorkoutSession:
        session = await self._open_session(session_id)
        if session.status == SessionStatus.in_progress.value:
            return session
        self._fold_pause(session)
        session.status = SessionStatus.in_progress.value
        await self.db.commit()
        logger.info("workout_session_resumed", user_id=self.user_id, session_id=session.id)
        return session

    async def log_set(self, session_id: int, payload: CompletedSetCreate) -> WorkoutSession:
        session = await self._open_session(session_id)
        workout_exercise = next(
            (item for item in session.workout.exercises if item.id == payload.workout_exercise_id),
            None,
        )
        if workout_exercise is None:
            raise InvalidStateException(
                detail=f"Exercise id={payload.workout_exercise_id} is not part of workout id={session.workout_id}"
            )
        session.completed_sets.append(
            CompletedSet(
                workout_exercise_id=workout_exercise.id,
                set_number=payload.set_number,
                reps=payload.reps,
                weight=payload.weight,
                rpe=payload.rpe,
                notes=payload.notes,
                completed_at=utcnow(),
            )
        )
        await self.db.commit()
        logger.info(
            "workout_set_logged",
            user_id=self.user_id,
            session_id=session.id,
            workout_exercise_id=workout_exercise.id,
            set_number=payload.set_number,
        )

        if payload.set_number < workout_exercise.target_sets:
            self.relay.send(self.user_id, RestTimerStarted(duration=workout_exercise.rest_seconds))
        else:
            upcoming = _following(session.workout, workout_exercise, payload.set_number)
            if upcoming is not None:
                self.relay.send(self.user_id, _exercise_changed(*upcoming))
        return session

    async def end_rest(self, session_id: int) -> WorkoutSession:
        """Rest is over, either run down or skipped: point the watch at the next set."""
        session = await self._open_session(session_id)
        workout: Workout = session.workout
        if session.completed_sets:
            last = session.completed_sets[-1]
            current = next((item for item in workout.exercises if item.id == last.workout_exercise_id), None)
            upcoming = _following(workout, current, last.set_number) if current is not None else None
        else:
            upcoming = (workout.exercises[0], 1) if workout.exercises else None

        self.relay.send(self.user_id, RestTimerEnded())
        if upcoming is not None:
            self.relay.send(self.user_id, _exercise_changed(*upcoming))
        logger.info(
            "workout_rest_ended",
            user_id=self.user_id,
            session_id=session.id,
            next_workout_exercise_id=upcoming[0].id if upcoming is not None else None,
        )
        return session

    async def complete_session(self, session_id: int, payload: SessionCompleteRequest | None = None) -> WorkoutSession:
        """Finish the session, count it toward the program and line up the next session."""
        session = await self._open_session(session_id)
        payload = payload or SessionCompleteRequest()
        workout: Workout = session.workout
        if workout.status == WorkoutStatus.deleted.value:
            raise InvalidStateException(detail=f"Workout id={workout.id} was deleted; cancel the session instead")
        now = utcnow()

        self._fold_pause(session, now)
        elapsed = int((now - session.started_at).total_seconds()) - (session.paused_seconds or 0)
        session.total_duration_seconds = max(0, elapsed)
        session.completed_at = now
        session.status = SessionStatus.completed.value
        if payload.calories_burned is not None:
            session.calories_burned = payload.calories_burned
        if payload.notes:
            session.notes = payload.notes

        was_completed = workout.status == WorkoutStatus.completed.value
        workout.status = WorkoutStatus.completed.value
        workout.completed_at = now
        workout.is_active = False

        records = await self.records.detect(session)

        update = None
        next_workout = None
        if not was_completed:
            update = await self.progress.record_completion(workout)
            if update is not None and update.counted and not update.program_completed:
                next_workout = await self.active.advance_to_next_workout(workout)

        await self.db.commit()

        WORKOUT_SESSIONS_COMPLETED_TOTAL.inc()
        logger.info(
            "workout_session_completed",
            user_id=self.user_id,
            session_id=session.id,
            workout_id=workout.id,
            duration_seconds=session.total_duration_seconds,
            personal_records=len(records),
            next_workout_id=next_workout.id if next_workout is not None else None,
        )

        exercises_completed = len({item.workout_exercise_id for item in session.completed_sets})
        self.relay.send(
            self.user_id,
            WorkoutEnded(duration=session.total_duration_seconds, exercises_completed=exercises_completed),
        )
        if update is not None and update.program_completed:
            await self.events.publish(
                ProgramChanged(user_id=self.user_id, user_program_id=update.user_program.id, reason="completed")
            )
        return session

    async def cancel_session(self, session_id: int) -> WorkoutSession:
        session = await self._open_session(session_id)
        now = utcnow()
        self._fold_pause(session, now)
        session.status = SessionStatus.cancelled.value
        session.completed_at = now
        if session.workout.status == WorkoutStatus.active.value:
            session.workout.status = WorkoutStatus.scheduled.value
        await self.db.commit()
        logger.info("workout_session_cancelled", user_id=self.user_id, session_id=session.id)
        return session

    async def start_over(self, session_id: int) -> WorkoutSession:
        """Throw away an open session, logged sets included, and begin a fresh one."""
        session = await self._open_session(session_id)
        workout_id = session.workout_id
        await self.db.delete(session)
        await self.db.flush()
        logger.info("workout_session_discarded", user_id=self.user_id, session_id=session_id, workout_id=workout_id)
        return await self.start_session(workout_id)

    async def history(self, workout_id: int) -> list[WorkoutSession]:
        await self.active.get_workout(workout_id)
        result = await self.db.execute(
            select(WorkoutSession)
            .where(WorkoutSession.workout_id == workout_id, WorkoutSession.user_id == self.user_id)
            .order_by(WorkoutSession.started_at.desc(), WorkoutSession.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    def _fold_pause(session: WorkoutSession, now=None) -> None:
        if session.paused_at is None:
            return
        now = now or utcnow()
        session.paused_seconds = (session.paused_seconds or 0) + max(
            0, int((now - session.paused_at).total_seconds())
        )
        session.paused_at = None
