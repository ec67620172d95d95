from datetime import date, datetime

from pydantic import BaseModel, Field

from ..models.enums import (
    CreationType,
    Difficulty,
    Equipment,
    ExerciseCategory,
    ExerciseLocation,
    MuscleGroup,
    WorkoutGoal,
    WorkoutStatus,
    WorkoutType,
)


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    muscle_group: MuscleGroup = MuscleGroup.full_body
    category: ExerciseCategory = ExerciseCategory.strength
    difficulty: Difficulty = Difficulty.intermediate
    equipment: Equipment = Equipment.bodyweight
    location: ExerciseLocation = ExerciseLocation.anywhere
    instructions: str | None = None


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseResponse(ExerciseBase):
    id: int
    is_favorite: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class WorkoutExerciseCreate(BaseModel):
    exercise_id: int
    target_sets: int = Field(default=3, ge=1)
    target_reps: int = Field(default=10, ge=1)
    target_weight: float | None = Field(default=None, ge=0)
    rest_seconds: int = Field(default=90, ge=0)
    notes: str | None = None


class WorkoutExerciseResponse(BaseModel):
    id: int
    exercise_id: int
    order_index: int
    target_sets: int
    target_reps: int
    target_weight: float | None = None
    rest_seconds: int
    notes: str | None = None
    exercise: ExerciseResponse

    class Config:
        from_attributes = True


class WorkoutCreate(BaseModel):
    """Custom standalone workout built by the user."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    estimated_duration: int = Field(default=45, ge=1)
    difficulty: Difficulty = Difficulty.intermediate
    goal: WorkoutGoal = WorkoutGoal.general
    scheduled_date: date | None = None
    exercises: list[WorkoutExerciseCreate] = Field(default_factory=list)


class WorkoutSummaryResponse(BaseModel):
    id: int
    name: str
    status: WorkoutStatus
    is_active: bool
    workout_type: WorkoutType
    scheduled_date: date | None = None
    source_program_id: int | None = None
    program_week_number: int | None = None
    program_day_number: int | None = None
    program_session_number: int | None = None

    class Config:
        from_attributes = True


class WorkoutResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    estimated_duration: int
    difficulty: Difficulty
    goal: WorkoutGoal
    creation_type: CreationType
    workout_type: WorkoutType
    status: WorkoutStatus
    is_active: bool
    scheduled_date: date | None = None
    completed_at: datetime | None = None
    source_program_id: int | None = None
    source_program_name: str | None = None
    program_week_number: int | None = None
    program_day_number: int | None = None
    program_session_number: int | None = None
    total_weeks: int | None = None
    total_days: int | None = None
    total_sessions: int | None = None
    created_at: datetime
    exercises: list[WorkoutExerciseResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True
