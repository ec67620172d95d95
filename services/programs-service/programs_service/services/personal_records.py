from datetime import timedelta

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import utcnow
from ..exceptions import PersonalRecordNotFoundException
from ..metrics import PERSONAL_RECORDS_TOTAL
from ..models import CompletedSet, PersonalRecord, WorkoutSession

logger = structlog.get_logger(__name__)


def _heavier(candidate: CompletedSet, current: CompletedSet | None) -> bool:
    if current is None:
        return True
    return (candidate.weight, candidate.reps) > (current.weight, current.reps)


class PersonalRecordService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def best_for(self, exercise_id: int) -> PersonalRecord | None:
        result = await self.db.execute(
            select(PersonalRecord)
            .where(PersonalRecord.user_id == self.user_id, PersonalRecord.exercise_id == exercise_id)
            .order_by(PersonalRecord.weight.desc(), PersonalRecord.reps.desc(), PersonalRecord.id.desc())
        )
        return result.scalars().first()

    async def get_best(self, exercise_id: int) -> PersonalRecord:
        record = await self.best_for(exercise_id)
        if record is None:
            raise PersonalRecordNotFoundException(exercise_id)
        return record

    async def list_records(self, *, exercise_id: int | None = None, days: int | None = None) -> list[PersonalRecord]:
        stmt = select(PersonalRecord).where(PersonalRecord.user_id == self.user_id)
        if exercise_id is not None:
            stmt = stmt.where(PersonalRecord.exercise_id == exercise_id)
        if days is not None:
            stmt = stmt.where(PersonalRecord.achieved_at >= utcnow() - timedelta(days=days))
        result = await self.db.execute(stmt.order_by(PersonalRecord.achieved_at.desc(), PersonalRecord.id.desc()))
        return list(result.scalars().all())

    async def detect(self, session: WorkoutSession) -> list[PersonalRecord]:
        """Record a PR for every exercise whose heaviest set in ``session`` beats the user's best.

        Weightless sets never count. The first weighted set for an exercise is
        its first record. Does not commit.
        """
        exercises = {item.id: item.exercise for item in session.workout.exercises}
        heaviest: dict[int, CompletedSet] = {}
        for completed in session.completed_sets:
            exercise = exercises.get(completed.workout_exercise_id)
            if exercise is None or not completed.weight or completed.weight <= 0:
                continue
            if _heavier(completed, heaviest.get(exercise.id)):
                heaviest[exercise.id] = completed

        records = []
        for exercise_id, completed in heaviest.items():
            best = await self.best_for(exercise_id)
            if best is not None and completed.weight <= best.weight:
                continue
            exercise = next(e for e in exercises.values() if e.id == exercise_id)
            record = PersonalRecord(
                user_id=self.user_id,
                exercise_id=exercise_id,
                exercise_name=exercise.name,
                weight=completed.weight,
                reps=completed.reps,
                previous_weight=best.weight if best is not None else None,
                achieved_at=session.completed_at or utcnow(),
            )
            session.personal_records.append(record)
            records.append(record)
            logger.info(
                "personal_record_set",
                user_id=self.user_id,
                session_id=session.id,
                exercise_id=exercise_id,
                weight=record.weight,
                previous_weight=record.previous_weight,
            )

        if records:
            PERSONAL_RECORDS_TOTAL.inc(len(records))
        return records
