from datetime import datetime

from pydantic import BaseModel


class PersonalRecordResponse(BaseModel):
    id: int
    exercise_id: int
    exercise_name: str
    weight: float
    reps: int
    previous_weight: float | None = None
    improvement_percentage: float | None = None
    achieved_at: datetime
    session_id: int | None = None

    class Config:
        from_attributes = True
