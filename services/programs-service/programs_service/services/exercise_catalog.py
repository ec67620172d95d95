import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ExerciseAlreadyExistsException, ExerciseNotFoundException
from ..metrics import CATALOG_EXERCISES_SYNTHESIZED_TOTAL
from ..models import Exercise
from ..models.enums import MuscleGroup
from ..schemas.workout import ExerciseCreate

logger = structlog.get_logger(__name__)


def _identity(name: str) -> str:
    return name.strip().lower()


class ExerciseCatalog:
    def __init__(self, db: AsyncSession):
        self.db = db
        # Entries resolved during this unit of work, keyed by lowercased name
        self._resolved: dict[str, Exercise] = {}

    async def find_by_name(self, name: str) -> Exercise | None:
        result = await self.db.execute(
            select(Exercise).where(func.lower(Exercise.name) == _identity(name)).order_by(Exercise.id).limit(1)
        )
        return result.scalars().first()

    async def upsert_or_create(self, name: str, *, category: str, difficulty: str) -> Exercise:
        """Return the catalog entry named ``name``, inserting a minimal one on a miss.

        The new entry is flushed so callers can link it by id straight away.
        """
        key = _identity(name)
        cached = self._resolved.get(key)
        if cached is not None:
            return cached

        exercise = await self.find_by_name(name)
        if exercise is None:
            exercise = Exercise(
                name=name.strip(),
                muscle_group=MuscleGroup.full_body.value,
                category=category,
                difficulty=difficulty,
            )
            self.db.add(exercise)
            await self.db.flush()
            CATALOG_EXERCISES_SYNTHESIZED_TOTAL.inc()
            logger.info("catalog_exercise_synthesized", exercise_id=exercise.id, name=exercise.name)

        self._resolved[key] = exercise
        return exercise

    async def list_exercises(
        self,
        *,
        category: str | None = None,
        muscle_group: str | None = None,
        search: str | None = None,
        favorites_only: bool = False,
    ) -> list[Exercise]:
        stmt = select(Exercise)
        if category:
            stmt = stmt.where(Exercise.category == category)
        if muscle_group:
            stmt = stmt.where(Exercise.muscle_group == muscle_group)
        if search:
            stmt = stmt.where(func.lower(Exercise.name).contains(search.strip().lower()))
        if favorites_only:
            stmt = stmt.where(Exercise.is_favorite.is_(True))
        result = await self.db.execute(stmt.order_by(Exercise.name))
        return list(result.scalars().all())

    async def get_exercise(self, exercise_id: int) -> Exercise:
        exercise = await self.db.get(Exercise, exercise_id)
        if exercise is None:
            raise ExerciseNotFoundException(exercise_id)
        return exercise

    async def create_exercise(self, payload: ExerciseCreate) -> Exercise:
        if await self.find_by_name(payload.name) is not None:
            raise ExerciseAlreadyExistsException(payload.name)
        data = payload.model_dump(mode="json")
        data["name"] = data["name"].strip()
        exercise = Exercise(**data)
        self.db.add(exercise)
        await self.db.commit()
        await self.db.refresh(exercise)
        logger.info("catalog_exercise_created", exercise_id=exercise.id, name=exercise.name)
        return exercise

    async def toggle_favorite(self, exercise_id: int) -> Exercise:
        exercise = await self.get_exercise(exercise_id)
        exercise.is_favorite = not exercise.is_favorite
        await self.db.commit()
        return exercise
