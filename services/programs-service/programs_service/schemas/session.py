from datetime import datetime

from pydantic import BaseModel, Field

from ..models.enums import SessionStatus
from .records import PersonalRecordResponse


class CompletedSetCreate(BaseModel):
    workout_exercise_id: int
    set_number: int = Field(default=1, ge=1)
    reps: int = Field(..., ge=0)
    weight: float = Field(default=0, ge=0)
    rpe: int | None = Field(default=None, ge=1, le=10)
    notes: str | None = None


class CompletedSetResponse(BaseModel):
    id: int
    workout_exercise_id: int
    set_number: int
    reps: int
    weight: float
    rpe: int | None = None
    notes: str | None = None
    completed_at: datetime

    class Config:
        from_attributes = True


class SessionCompleteRequest(BaseModel):
    calories_burned: int | None = Field(default=None, ge=0)
    notes: str | None = None


class WorkoutSessionResponse(BaseModel):
    id: int
    workout_id: int
    user_program_id: int | None = None
    status: SessionStatus
    started_at: datetime
    paused_at: datetime | None = None
    paused_seconds: int = 0
    completed_at: datetime | None = None
    total_duration_seconds: int | None = None
    calories_burned: int | None = None
    notes: str | None = None
    completed_sets: list[CompletedSetResponse] = Field(default_factory=list)
    personal_records: list[PersonalRecordResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True
