from datetime import date, datetime

from pydantic import BaseModel, Field

from ..models.enums import ProgramStatus
from .program import ProgramTemplateSummary


class EnrollRequest(BaseModel):
    template_id: int
    start_date: date | None = Field(default=None, description="Defaults to today")
    replace_active: bool = Field(
        default=False, description="End the currently active program and start this one instead"
    )


class QueueRequest(BaseModel):
    template_id: int
    notes: str | None = Field(default=None, max_length=512)


class StartProgramRequest(BaseModel):
    start_date: date | None = None
    replace_active: bool = False


class UserProgramResponse(BaseModel):
    id: int
    template_id: int
    status: ProgramStatus
    start_date: date | None = None
    target_end_date: date | None = None
    end_date: datetime | None = None
    current_week: int
    current_day: int
    completed_workouts: int
    completed_days: dict[str, list[int]] = Field(default_factory=dict)
    notes: str | None = None
    created_at: datetime
    template: ProgramTemplateSummary

    class Config:
        from_attributes = True


class EnrollmentResponse(BaseModel):
    user_program: UserProgramResponse
    workouts_created: int
    replaced_program_id: int | None = None


class ProgramProgressResponse(BaseModel):
    user_program_id: int
    status: ProgramStatus
    total_workouts: int
    completed_workouts: int
    overall_progress: float
    current_week: int
    current_day: int
    workouts_this_week: int
    week_progress: float
    completed_days_by_week: dict[int, list[int]]
    current_streak: int
    best_streak: int
    days_remaining: int
    next_workout_id: int | None = None

    class Config:
        from_attributes = True
