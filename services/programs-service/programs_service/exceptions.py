from fastapi import HTTPException, status


class UnauthorizedException(HTTPException):
    def __init__(self, detail: str = "X-User-Id header required"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Object not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class TemplateNotFoundException(NotFoundException):
    def __init__(self, template_id: int):
        super().__init__(detail=f"Program template id={template_id} not found")


class UserProgramNotFoundException(NotFoundException):
    def __init__(self, user_program_id: int):
        super().__init__(detail=f"Program enrollment id={user_program_id} not found")


class WorkoutNotFoundException(NotFoundException):
    def __init__(self, workout_id: int):
        super().__init__(detail=f"Workout id={workout_id} not found")


class SessionNotFoundException(NotFoundException):
    def __init__(self, session_id: int):
        super().__init__(detail=f"Session id={session_id} not found")


class ExerciseNotFoundException(NotFoundException):
    def __init__(self, exercise_id: int):
        super().__init__(detail=f"Exercise id={exercise_id} not found")


class PersonalRecordNotFoundException(NotFoundException):
    def __init__(self, exercise_id: int):
        super().__init__(detail=f"No personal record for exercise id={exercise_id}")


class ConflictException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ActiveProgramConflictException(ConflictException):
    def __init__(self, active_program_id: int):
        super().__init__(
            detail=f"Program enrollment id={active_program_id} is already active; end or replace it first"
        )


class ExerciseAlreadyExistsException(ConflictException):
    def __init__(self, name: str):
        super().__init__(detail=f"Exercise '{name}' already exists in the catalog")


class InvalidStateException(ConflictException):
    pass


class TemplateValidationError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class ScheduleReferenceError(TemplateValidationError):
    def __init__(self, day_of_week: int, workout_name: str):
        self.day_of_week = day_of_week
        self.workout_name = workout_name
        super().__init__(
            detail=f"Schedule day {day_of_week} references unknown workout definition '{workout_name}'"
        )


class PersistenceFailedException(HTTPException):
    """Storage failed; the request can be retried as-is."""

    def __init__(self, detail: str = "Failed to persist changes, please retry"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
