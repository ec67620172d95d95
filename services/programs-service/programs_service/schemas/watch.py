"""Message vocabulary shared with the companion watch app.

Every message carries ``version`` so either side can reject payloads it does
not understand instead of guessing at their shape.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, RootModel

from ..database import utcnow

WATCH_PROTOCOL_VERSION = 1


class WatchMessageBase(BaseModel):
    version: Literal[1] = WATCH_PROTOCOL_VERSION
    timestamp: datetime = Field(default_factory=utcnow)


class WorkoutStarted(WatchMessageBase):
    type: Literal["workout_started"] = "workout_started"
    workout_name: str
    exercise: str | None = None
    total_sets: int = Field(default=0, ge=0)


class ExerciseChanged(WatchMessageBase):
    type: Literal["exercise_changed"] = "exercise_changed"
    exercise: str
    set_number: int = Field(default=1, ge=1)
    total_sets: int = Field(default=1, ge=1)
    target_weight: float | None = None
    target_reps: int | None = None


class RestTimerStarted(WatchMessageBase):
    type: Literal["rest_timer_started"] = "rest_timer_started"
    duration: int = Field(..., ge=0, description="Seconds")


class RestTimerEnded(WatchMessageBase):
    type: Literal["rest_timer_ended"] = "rest_timer_ended"


class WorkoutEnded(WatchMessageBase):
    type: Literal["workout_ended"] = "workout_ended"
    duration: int = Field(..., ge=0, description="Seconds")
    exercises_completed: int = Field(default=0, ge=0)


class HealthDataUpdate(WatchMessageBase):
    type: Literal["health_data_update"] = "health_data_update"
    heart_rate: int = Field(..., ge=0, le=300)


WatchMessage = Annotated[
    Union[WorkoutStarted, ExerciseChanged, RestTimerStarted, RestTimerEnded, WorkoutEnded, HealthDataUpdate],
    Field(discriminator="type"),
]


class WatchPayload(RootModel[WatchMessage]):
    """A single message on the wire, dispatched on its ``type`` field."""


class HealthSnapshot(BaseModel):
    heart_rate: int | None = None
    received_at: datetime | None = None
