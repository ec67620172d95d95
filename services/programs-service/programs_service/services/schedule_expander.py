from dataclasses import dataclass
from datetime import date, timedelta

import structlog
from pydantic import ValidationError

from ..exceptions import ScheduleReferenceError, TemplateValidationError
from ..models import ProgramTemplate
from ..schemas.program import ProgramTemplateBase

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScheduledEntry:
    week_number: int
    day_of_week: int
    workout_name: str | None
    scheduled_date: date

    @property
    def is_rest(self) -> bool:
        return self.workout_name is None


def load_blueprint(template: ProgramTemplate) -> ProgramTemplateBase:
    """Validate a stored template's JSON schedule and definitions."""
    try:
        return ProgramTemplateBase.model_validate(template, from_attributes=True)
    except ValidationError as exc:
        logger.warning("program_template_invalid", template_id=template.id, error=str(exc))
        raise TemplateValidationError(
            detail=f"Program template id={template.id} is invalid: {exc.errors()[0]['msg']}"
        ) from exc


def expand_schedule(
    template: ProgramTemplateBase,
    start_date: date,
    include_rest_days: bool = False,
) -> list[ScheduledEntry]:
    """Lay the weekly schedule out across ``duration_weeks`` calendar weeks.

    Week ``w`` starts ``(w - 1)`` weeks after ``start_date`` and day ``d`` of
    that week falls ``d - 1`` days after the week start, whatever weekday
    ``start_date`` happens to be. Entries come back week-major, day-minor.
    Rest days are skipped unless ``include_rest_days`` is set, in which case
    they appear with ``workout_name=None``.
    """
    known = {definition.name for definition in template.workout_definitions}
    days = sorted(template.schedule, key=lambda entry: entry.day_of_week)
    for day in days:
        if not day.is_rest and day.workout_name not in known:
            raise ScheduleReferenceError(day.day_of_week, day.workout_name or "")

    entries: list[ScheduledEntry] = []
    for week_number in range(1, template.duration_weeks + 1):
        week_start = start_date + timedelta(weeks=week_number - 1)
        for day in days:
            if day.is_rest and not include_rest_days:
                continue
            entries.append(
                ScheduledEntry(
                    week_number=week_number,
                    day_of_week=day.day_of_week,
                    workout_name=None if day.is_rest else day.workout_name,
                    scheduled_date=week_start + timedelta(days=day.day_of_week - 1),
                )
            )
    return entries
