from .checkin import CheckInCreate, CheckInResponse, CheckInSummaryResponse
from .enrollment import (
    EnrollmentResponse,
    EnrollRequest,
    ProgramProgressResponse,
    QueueRequest,
    StartProgramRequest,
    UserProgramResponse,
)
from .program import (
    ProgramDaySchedule,
    ProgramExerciseDefinition,
    ProgramTemplateBase,
    ProgramTemplateCreate,
    ProgramTemplateResponse,
    ProgramTemplateSummary,
    ProgramWorkoutDefinition,
    ScheduledEntryResponse,
)
from .records import PersonalRecordResponse
from .session import (
    CompletedSetCreate,
    CompletedSetResponse,
    SessionCompleteRequest,
    WorkoutSessionResponse,
)
from .watch import (
    ExerciseChanged,
    HealthDataUpdate,
    HealthSnapshot,
    RestTimerEnded,
    RestTimerStarted,
    WatchMessage,
    WatchPayload,
    WorkoutEnded,
    WorkoutStarted,
)
from .workout import (
    ExerciseCreate,
    ExerciseResponse,
    WorkoutCreate,
    WorkoutExerciseCreate,
    WorkoutExerciseResponse,
    WorkoutResponse,
    WorkoutSummaryResponse,
)
