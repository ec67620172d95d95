from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from ..models.enums import Difficulty, ExerciseCategory, ProgramGoal

DAYS_IN_WEEK = 7


class ProgramExerciseDefinition(BaseModel):
    exercise_name: str = Field(..., min_length=1, max_length=120)
    sets: int = Field(default=3, ge=1)
    reps: str = Field(default="10", description="Literal or range, e.g. '10', '8-12', 'AMRAP'")
    weight: str | None = Field(default=None, description="Free text, e.g. '135 lbs', 'RPE 7', 'Bodyweight'")
    rest_seconds: int = Field(default=90, ge=0)
    notes: str | None = None


class ProgramWorkoutDefinition(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    estimated_minutes: int = Field(default=45, ge=1)
    exercises: list[ProgramExerciseDefinition] = Field(default_factory=list)


class ProgramDaySchedule(BaseModel):
    day_of_week: int = Field(..., ge=1, le=DAYS_IN_WEEK, description="1 = Monday, 7 = Sunday")
    workout_name: str | None = None
    is_rest: bool = False
    notes: str | None = None

    @model_validator(mode="after")
    def _training_day_names_workout(self):
        if not self.is_rest and not self.workout_name:
            raise ValueError(f"Day {self.day_of_week} is not a rest day but names no workout")
        return self


class ProgramTemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: ExerciseCategory = ExerciseCategory.strength
    difficulty: Difficulty = Difficulty.intermediate
    goal: ProgramGoal = ProgramGoal.general
    duration_weeks: int = Field(..., ge=1, le=104)
    workouts_per_week: int = Field(..., ge=1, le=DAYS_IN_WEEK)
    estimated_minutes_per_session: int = Field(default=45, ge=1)
    equipment_required: list[str] = Field(default_factory=list)
    schedule: list[ProgramDaySchedule]
    workout_definitions: list[ProgramWorkoutDefinition]

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def _schedule_is_consistent(self):
        days = [entry.day_of_week for entry in self.schedule]
        if sorted(days) != list(range(1, DAYS_IN_WEEK + 1)):
            raise ValueError("Schedule must cover each day of the week (1-7) exactly once")

        names = [definition.name for definition in self.workout_definitions]
        if len(set(names)) != len(names):
            raise ValueError("Workout definition names must be unique")

        known = set(names)
        for entry in self.schedule:
            if not entry.is_rest and entry.workout_name not in known:
                raise ValueError(
                    f"Schedule day {entry.day_of_week} references unknown workout definition '{entry.workout_name}'"
                )

        training_days = sum(1 for entry in self.schedule if not entry.is_rest)
        if training_days != self.workouts_per_week:
            raise ValueError(
                f"workouts_per_week is {self.workouts_per_week} but the schedule has {training_days} training days"
            )
        return self

    def definition_named(self, name: str) -> ProgramWorkoutDefinition | None:
        for definition in self.workout_definitions:
            if definition.name == name:
                return definition
        return None


class ProgramTemplateCreate(ProgramTemplateBase):
    pass


class ProgramTemplateResponse(ProgramTemplateBase):
    id: int
    created_at: datetime
    total_workouts: int


class ProgramTemplateSummary(BaseModel):
    id: int
    name: str
    category: ExerciseCategory
    difficulty: Difficulty
    goal: ProgramGoal
    duration_weeks: int
    workouts_per_week: int
    total_workouts: int

    class Config:
        from_attributes = True


class ScheduledEntryResponse(BaseModel):
    week_number: int
    day_of_week: int
    workout_name: str | None
    scheduled_date: date

    class Config:
        from_attributes = True
