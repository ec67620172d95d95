import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas as sm
from ..database import get_db, utcnow
from ..dependencies import get_current_user_id
from ..exceptions import PersistenceFailedException
from ..models.enums import ProgramStatus
from ..services.enrollment_service import EnrollmentCoordinator, EnrollmentResult
from ..services.progress_service import ProgramProgressService
from ..services.workout_service import WorkoutService

router = APIRouter(prefix="/programs")

logger = structlog.get_logger(__name__)


def get_enrollment_coordinator(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> EnrollmentCoordinator:
    return EnrollmentCoordinator(db, user_id)


def get_progress_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> ProgramProgressService:
    return ProgramProgressService(db, user_id)


def _enrollment_response(result: EnrollmentResult, user_id: str) -> sm.EnrollmentResponse:
    if not result.success:
        logger.error("program_enrollment_unavailable", user_id=user_id, error=result.error)
        raise PersistenceFailedException(detail=result.error or "Failed to save enrollment, please retry")
    return sm.EnrollmentResponse(
        user_program=sm.UserProgramResponse.model_validate(result.user_program),
        workouts_created=result.workouts_created,
        replaced_program_id=result.replaced_program_id,
    )


@router.post("/enroll", response_model=sm.EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll(
    payload: sm.EnrollRequest,
    coordinator: EnrollmentCoordinator = Depends(get_enrollment_coordinator),
    user_id: str = Depends(get_current_user_id),
):
    start_date = payload.start_date or utcnow().date()
    logger.info(
        "program_enroll_requested",
        user_id=user_id,
        template_id=payload.template_id,
        start_date=start_date.isoformat(),
        replace_active=payload.replace_active,
    )
    result = await coordinator.enroll_by_id(payload.template_id, start_date, replace_active=payload.replace_active)
    return _enrollment_response(result, user_id)


@router.post("/queue", response_model=sm.UserProgramResponse, status_code=status.HTTP_201_CREATED)
async def queue_program(
    payload: sm.QueueRequest,
    coordinator: EnrollmentCoordinator = Depends(get_enrollment_coordinator),
):
    user_program = await coordinator.queue(payload.template_id, notes=payload.notes)
    return sm.UserProgramResponse.model_validate(user_program)


@router.post("/{user_program_id}/start", response_model=sm.EnrollmentResponse)
async def start_program(
    user_program_id: int,
    payload: sm.StartProgramRequest | None = None,
    coordinator: EnrollmentCoordinator = Depends(get_enrollment_coordinator),
    user_id: str = Depends(get_current_user_id),
):
    payload = payload or sm.StartProgramRequest()
    start_date = payload.start_date or utcnow().date()
    result = await coordinator.start_queued(user_program_id, start_date, replace_active=payload.replace_active)
    return _enrollment_response(result, user_id)


@router.post("/{user_program_id}/end", response_model=sm.UserProgramResponse)
async def end_program(
    user_program_id: int,
    coordinator: EnrollmentCoordinator = Depends(get_enrollment_coordinator),
):
    user_program = await coordinator.end_program(user_program_id)
    return sm.UserProgramResponse.model_validate(user_program)


@router.get("/", response_model=list[sm.UserProgramResponse])
async def list_programs(
    status_filter: ProgramStatus | None = Query(None, alias="status"),
    coordinator: EnrollmentCoordinator = Depends(get_enrollment_coordinator),
):
    programs = await coordinator.list_programs(status=status_filter.value if status_filter else None)
    return [sm.UserProgramResponse.model_validate(p) for p in programs]


@router.get("/active", response_model=sm.UserProgramResponse | None)
async def get_active_program(coordinator: EnrollmentCoordinator = Depends(get_enrollment_coordinator)):
    program = await coordinator.get_active_program()
    if program is None:
        return None
    return sm.UserProgramResponse.model_validate(program)


@router.get("/{user_program_id}", response_model=sm.UserProgramResponse)
async def get_program(
    user_program_id: int,
    coordinator: EnrollmentCoordinator = Depends(get_enrollment_coordinator),
):
    program = await coordinator.get_user_program(user_program_id)
    return sm.UserProgramResponse.model_validate(program)


@router.get("/{user_program_id}/progress", response_model=sm.ProgramProgressResponse)
async def get_progress(
    user_program_id: int,
    progress_service: ProgramProgressService = Depends(get_progress_service),
):
    progress = await progress_service.get_progress(user_program_id)
    return sm.ProgramProgressResponse.model_validate(progress)


@router.get("/{user_program_id}/workouts", response_model=list[sm.WorkoutSummaryResponse])
async def list_program_workouts(
    user_program_id: int,
    include_deleted: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    await ProgramProgressService(db, user_id).get_user_program(user_program_id)
    workouts = await WorkoutService(db, user_id).list_workouts(
        program_id=user_program_id, include_deleted=include_deleted
    )
    return [sm.WorkoutSummaryResponse.model_validate(w) for w in workouts]
