from datetime import date

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas as sm
from ..database import get_db, utcnow
from ..dependencies import get_current_user_id
from ..models.enums import Difficulty, ExerciseCategory, ProgramGoal
from ..services.template_service import TemplateService

router = APIRouter(prefix="/templates")

logger = structlog.get_logger(__name__)


def get_template_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> TemplateService:
    return TemplateService(db)


@router.post("/", response_model=sm.ProgramTemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: sm.ProgramTemplateCreate,
    template_service: TemplateService = Depends(get_template_service),
    user_id: str = Depends(get_current_user_id),
):
    logger.info("program_template_create_requested", user_id=user_id, name=payload.name)
    template = await template_service.create_template(payload)
    return sm.ProgramTemplateResponse.model_validate(template)


@router.get("/", response_model=list[sm.ProgramTemplateSummary])
async def list_templates(
    category: ExerciseCategory | None = Query(None),
    difficulty: Difficulty | None = Query(None),
    goal: ProgramGoal | None = Query(None),
    template_service: TemplateService = Depends(get_template_service),
):
    templates = await template_service.list_templates(
        category=category.value if category else None,
        difficulty=difficulty.value if difficulty else None,
        goal=goal.value if goal else None,
    )
    return [sm.ProgramTemplateSummary.model_validate(t) for t in templates]


@router.get("/{template_id}", response_model=sm.ProgramTemplateResponse)
async def get_template(template_id: int, template_service: TemplateService = Depends(get_template_service)):
    template = await template_service.get_template(template_id)
    return sm.ProgramTemplateResponse.model_validate(template)


@router.get("/{template_id}/schedule", response_model=list[sm.ScheduledEntryResponse])
async def preview_schedule(
    template_id: int,
    start_date: date | None = Query(None, description="Defaults to today"),
    template_service: TemplateService = Depends(get_template_service),
):
    entries = await template_service.preview_schedule(template_id, start_date or utcnow().date())
    return [sm.ScheduledEntryResponse.model_validate(entry) for entry in entries]
