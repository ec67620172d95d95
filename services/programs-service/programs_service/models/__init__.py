from .catalog import Exercise  # noqa: F401
from .checkin import DailyCheckIn  # noqa: F401
from .program import ProgramTemplate, UserProgram, week_key  # noqa: F401
from .records import PersonalRecord  # noqa: F401
from .workout import CompletedSet, Workout, WorkoutExercise, WorkoutSession  # noqa: F401

__all__ = [
    "CompletedSet",
    "DailyCheckIn",
    "Exercise",
    "PersonalRecord",
    "ProgramTemplate",
    "UserProgram",
    "Workout",
    "WorkoutExercise",
    "WorkoutSession",
    "week_key",
]
