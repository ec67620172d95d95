from datetime import date, datetime

from pydantic import BaseModel, Field

from ..models.enums import Mood


class CheckInCreate(BaseModel):
    checkin_date: date | None = Field(default=None, description="Defaults to today")
    mood: Mood
    energy_level: int | None = Field(default=None, ge=1, le=10)
    stress_level: int | None = Field(default=None, ge=1, le=10)
    soreness_level: int | None = Field(default=None, ge=1, le=10)
    notes: str | None = Field(default=None, max_length=2000)
    tags: list[str] = Field(default_factory=list, max_length=20)


class CheckInResponse(BaseModel):
    id: int
    checkin_date: date
    mood: Mood
    mood_score: int
    energy_level: int | None = None
    stress_level: int | None = None
    soreness_level: int | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CheckInSummaryResponse(BaseModel):
    start_date: date
    end_date: date
    total_checkins: int
    current_streak: int
    mood_breakdown: dict[str, int]
    average_mood_score: float | None = None
    average_energy: float | None = None
    average_stress: float | None = None
    average_soreness: float | None = None

    class Config:
        from_attributes = True
