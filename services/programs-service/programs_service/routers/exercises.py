from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas as sm
from ..database import get_db
from ..dependencies import get_current_user_id
from ..models.enums import ExerciseCategory, MuscleGroup
from ..services.exercise_catalog import ExerciseCatalog

router = APIRouter(prefix="/exercises")


def get_exercise_catalog(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> ExerciseCatalog:
    return ExerciseCatalog(db)


@router.get("/", response_model=list[sm.ExerciseResponse])
async def list_exercises(
    category: ExerciseCategory | None = Query(None),
    muscle_group: MuscleGroup | None = Query(None),
    search: str | None = Query(None, max_length=120),
    favorites_only: bool = Query(False),
    catalog: ExerciseCatalog = Depends(get_exercise_catalog),
):
    exercises = await catalog.list_exercises(
        category=category.value if category else None,
        muscle_group=muscle_group.value if muscle_group else None,
        search=search,
        favorites_only=favorites_only,
    )
    return [sm.ExerciseResponse.model_validate(e) for e in exercises]


@router.post("/", response_model=sm.ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(payload: sm.ExerciseCreate, catalog: ExerciseCatalog = Depends(get_exercise_catalog)):
    exercise = await catalog.create_exercise(payload)
    return sm.ExerciseResponse.model_validate(exercise)


@router.get("/{exercise_id}", response_model=sm.ExerciseResponse)
async def get_exercise(exercise_id: int, catalog: ExerciseCatalog = Depends(get_exercise_catalog)):
    exercise = await catalog.get_exercise(exercise_id)
    return sm.ExerciseResponse.model_validate(exercise)


@router.post("/{exercise_id}/favorite", response_model=sm.ExerciseResponse)
async def toggle_favorite(exercise_id: int, catalog: ExerciseCatalog = Depends(get_exercise_catalog)):
    exercise = await catalog.toggle_favorite(exercise_id)
    return sm.ExerciseResponse.model_validate(exercise)
