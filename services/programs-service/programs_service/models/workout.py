from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..database import Base, utcnow
from .enums import CreationType, Difficulty, SessionStatus, WorkoutGoal, WorkoutStatus, WorkoutType


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    estimated_duration = Column(Integer, nullable=False, default=45)  # minutes
    difficulty = Column(String(32), nullable=False, default=Difficulty.intermediate.value)
    goal = Column(String(32), nullable=False, default=WorkoutGoal.general.value)
    creation_type = Column(String(32), nullable=False, default=CreationType.custom.value)
    workout_type = Column(String(32), nullable=False, default=WorkoutType.standalone.value)
    status = Column(String(32), nullable=False, default=WorkoutStatus.scheduled.value, index=True)
    is_active = Column(Boolean, nullable=False, default=False, index=True)
    scheduled_date = Column(Date, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    # Program tracking, only set on generated program sessions
    source_program_id = Column(
        Integer, ForeignKey("user_programs.id", ondelete="CASCADE"), nullable=True, index=True
    )
    source_program_name = Column(String(255), nullable=True)
    program_week_number = Column(Integer, nullable=True)
    program_day_number = Column(Integer, nullable=True)
    program_session_number = Column(Integer, nullable=True)
    total_weeks = Column(Integer, nullable=True)
    total_days = Column(Integer, nullable=True)
    total_sessions = Column(Integer, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order_index",
        lazy="selectin",
    )
    sessions = relationship(
        "WorkoutSession",
        back_populates="workout",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_program_session(self) -> bool:
        return self.source_program_id is not None

    def __repr__(self):
        return "<Workout(id=%s, name='%s', source_program_id=%s, session=%s)>" % (
            self.id,
            self.name,
            self.source_program_id,
            self.program_session_number,
        )


class WorkoutExercise(Base):
    __tablename__ = "workout_exercises"
    __table_args__ = (UniqueConstraint("workout_id", "order_index", name="uq_workout_exercise_order"),)

    id = Column(Integer, primary_key=True, index=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    target_sets = Column(Integer, nullable=False, default=3)
    target_reps = Column(Integer, nullable=False, default=10)
    target_weight = Column(Float, nullable=True)
    rest_seconds = Column(Integer, nullable=False, default=90)
    notes = Column(Text, nullable=True)

    workout = relationship("Workout", back_populates="exercises")
    exercise = relationship("Exercise", lazy="selectin")


class WorkoutSession(Base):
    __tablename__ = "workout_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_program_id = Column(Integer, ForeignKey("user_programs.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(32), nullable=False, default=SessionStatus.in_progress.value, index=True)
    started_at = Column(DateTime, nullable=False, default=utcnow)
    paused_at = Column(DateTime, nullable=True)
    paused_seconds = Column(Integer, nullable=False, default=0)
    completed_at = Column(DateTime, nullable=True)
    total_duration_seconds = Column(Integer, nullable=True)
    calories_burned = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    workout = relationship("Workout", back_populates="sessions", lazy="selectin")
    completed_sets = relationship(
        "CompletedSet",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="CompletedSet.id",
        lazy="selectin",
    )
    personal_records = relationship(
        "PersonalRecord",
        back_populates="session",
        order_by="PersonalRecord.id",
        lazy="selectin",
        passive_deletes=True,
    )

    @property
    def is_open(self) -> bool:
        return self.status in (SessionStatus.in_progress.value, SessionStatus.paused.value)

    def __repr__(self):
        return "<WorkoutSession(id=%s, workout_id=%s, status=%s)>" % (self.id, self.workout_id, self.status)


class CompletedSet(Base):
    __tablename__ = "completed_sets"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    workout_exercise_id = Column(
        Integer, ForeignKey("workout_exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    set_number = Column(Integer, nullable=False, default=1)
    reps = Column(Integer, nullable=False, default=0)
    weight = Column(Float, nullable=False, default=0)
    rpe = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime, nullable=False, default=utcnow)

    session = relationship("WorkoutSession", back_populates="completed_sets")
