import structlog
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas as sm
from ..database import get_db
from ..dependencies import get_current_user_id
from ..models.enums import WorkoutStatus
from ..services.workout_service import WorkoutService

router = APIRouter(prefix="/workouts")

logger = structlog.get_logger(__name__)


def get_workout_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> WorkoutService:
    return WorkoutService(db, user_id)


@router.get("/", response_model=list[sm.WorkoutSummaryResponse])
async def list_workouts(
    status_filter: WorkoutStatus | None = Query(None, alias="status"),
    workout_service: WorkoutService = Depends(get_workout_service),
):
    workouts = await workout_service.list_workouts(status=status_filter.value if status_filter else None)
    return [sm.WorkoutSummaryResponse.model_validate(w) for w in workouts]


@router.post("/", response_model=sm.WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    payload: sm.WorkoutCreate,
    workout_service: WorkoutService = Depends(get_workout_service),
    user_id: str = Depends(get_current_user_id),
):
    logger.info("custom_workout_create_requested", user_id=user_id, name=payload.name)
    workout = await workout_service.create_custom_workout(payload)
    return sm.WorkoutResponse.model_validate(workout)


@router.get("/current", response_model=sm.WorkoutResponse | None)
async def get_current_workout(workout_service: WorkoutService = Depends(get_workout_service)):
    workout = await workout_service.active.current_workout()
    if workout is None:
        return None
    return sm.WorkoutResponse.model_validate(workout)


@router.get("/{workout_id}", response_model=sm.WorkoutResponse)
async def get_workout(workout_id: int, workout_service: WorkoutService = Depends(get_workout_service)):
    workout = await workout_service.get_workout(workout_id)
    return sm.WorkoutResponse.model_validate(workout)


@router.post("/{workout_id}/activate", response_model=sm.WorkoutResponse)
async def activate_workout(
    workout_id: int,
    workout_service: WorkoutService = Depends(get_workout_service),
    user_id: str = Depends(get_current_user_id),
):
    logger.info("workout_activate_requested", user_id=user_id, workout_id=workout_id)
    workout = await workout_service.active.set_active_workout(workout_id)
    return sm.WorkoutResponse.model_validate(workout)


@router.delete("/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workout(workout_id: int, workout_service: WorkoutService = Depends(get_workout_service)):
    await workout_service.delete_workout(workout_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
