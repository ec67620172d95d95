import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas as sm
from ..database import get_db
from ..dependencies import get_current_user_id
from ..services.session_service import SessionService

router = APIRouter(prefix="/sessions")

logger = structlog.get_logger(__name__)


def get_session_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> SessionService:
    return SessionService(db, user_id)


@router.post(
    "/{workout_id}/start",
    response_model=sm.WorkoutSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_session(
    workout_id: int,
    session_service: SessionService = Depends(get_session_service),
    user_id: str = Depends(get_current_user_id),
):
    logger.info("workout_session_start_requested", user_id=user_id, workout_id=workout_id)
    session = await session_service.start_session(workout_id)
    return sm.WorkoutSessionResponse.model_validate(session)


@router.get("/{workout_id}/history", response_model=list[sm.WorkoutSessionResponse])
async def session_history(workout_id: int, session_service: SessionService = Depends(get_session_service)):
    sessions = await session_service.history(workout_id)
    return [sm.WorkoutSessionResponse.model_validate(s) for s in sessions]


@router.get("/{session_id}", response_model=sm.WorkoutSessionResponse)
async def get_session(session_id: int, session_service: SessionService = Depends(get_session_service)):
    session = await session_service.get_session(session_id)
    return sm.WorkoutSessionResponse.model_validate(session)


@router.post("/{session_id}/pause", response_model=sm.WorkoutSessionResponse)
async def pause_session(session_id: int, session_service: SessionService = Depends(get_session_service)):
    session = await session_service.pause_session(session_id)
    return sm.WorkoutSessionResponse.model_validate(session)


@router.post("/{session_id}/resume", response_model=sm.WorkoutSessionResponse)
async def resume_session(session_id: int, session_service: SessionService = Depends(get_session_service)):
    session = await session_service.resume_session(session_id)
    return sm.WorkoutSessionResponse.model_validate(session)


@router.post("/{session_id}/sets", response_model=sm.WorkoutSessionResponse, status_code=status.HTTP_201_CREATED)
async def log_set(
    session_id: int,
    payload: sm.CompletedSetCreate,
    session_service: SessionService = Depends(get_session_service),
):
    session = await session_service.log_set(session_id, payload)
    return sm.WorkoutSessionResponse.model_validate(session)


@router.post("/{session_id}/complete", response_model=sm.WorkoutSessionResponse)
async def complete_session(
    session_id: int,
    payload: sm.SessionCompleteRequest | None = None,
    session_service: SessionService = Depends(get_session_service),
    user_id: str = Depends(get_current_user_id),
):
    logger.info("workout_session_complete_requested", user_id=user_id, session_id=session_id)
    session = await session_service.complete_session(session_id, payload)
    return sm.WorkoutSessionResponse.model_validate(session)


@router.post("/{session_id}/cancel", response_model=sm.WorkoutSessionResponse)
async def cancel_session(session_id: int, session_service: SessionService = Depends(get_session_service)):
    session = await session_service.cancel_session(session_id)
    return sm.WorkoutSessionResponse.model_validate(session)


@router.post("/{session_id}/start-over", response_model=sm.WorkoutSessionResponse, status_code=status.HTTP_201_CREATED)
async def start_over(session_id: int, session_service: SessionService = Depends(get_session_service)):
    session = await session_service.start_over(session_id)
    return sm.WorkoutSessionResponse.model_validate(session)


@router.post("/{session_id}/rest/end", response_model=sm.WorkoutSessionResponse)
async def end_rest(session_id: int, session_service: SessionService = Depends(get_session_service)):
    session = await session_service.end_rest(session_id)
    return sm.WorkoutSessionResponse.model_validate(session)
