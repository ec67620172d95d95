from datetime import date

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import TemplateNotFoundException
from ..models import ProgramTemplate
from ..schemas.program import ProgramTemplateCreate
from .schedule_expander import ScheduledEntry, expand_schedule, load_blueprint

logger = structlog.get_logger(__name__)


class TemplateService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_template(self, payload: ProgramTemplateCreate) -> ProgramTemplate:
        template = ProgramTemplate(**payload.model_dump(mode="json"))
        self.db.add(template)
        await self.db.commit()
        logger.info(
            "program_template_created",
            template_id=template.id,
            name=template.name,
            duration_weeks=template.duration_weeks,
            workouts_per_week=template.workouts_per_week,
        )
        return template

    async def list_templates(
        self,
        *,
        category: str | None = None,
        difficulty: str | None = None,
        goal: str | None = None,
    ) -> list[ProgramTemplate]:
        stmt = select(ProgramTemplate)
        if category:
            stmt = stmt.where(ProgramTemplate.category == category)
        if difficulty:
            stmt = stmt.where(ProgramTemplate.difficulty == difficulty)
        if goal:
            stmt = stmt.where(ProgramTemplate.goal == goal)
        result = await self.db.execute(stmt.order_by(ProgramTemplate.name, ProgramTemplate.id))
        return list(result.scalars().all())

    async def get_template(self, template_id: int) -> ProgramTemplate:
        template = await self.db.get(ProgramTemplate, template_id)
        if template is None:
            raise TemplateNotFoundException(template_id)
        return template

    async def preview_schedule(self, template_id: int, start_date: date) -> list[ScheduledEntry]:
        template = await self.get_template(template_id)
        return expand_schedule(load_blueprint(template), start_date, include_rest_days=True)
