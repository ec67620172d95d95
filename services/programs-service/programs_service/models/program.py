from datetime import timedelta

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base, utcnow
from .enums import Difficulty, ExerciseCategory, ProgramGoal, ProgramStatus


def week_key(week_number: int) -> str:
    return f"week{week_number}"


class ProgramTemplate(Base):
    __tablename__ = "program_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(32), nullable=False, default=ExerciseCategory.strength.value)
    difficulty = Column(String(32), nullable=False, default=Difficulty.intermediate.value)
    goal = Column(String(32), nullable=False, default=ProgramGoal.general.value)
    duration_weeks = Column(Integer, nullable=False, default=4)
    workouts_per_week = Column(Integer, nullable=False, default=3)
    estimated_minutes_per_session = Column(Integer, nullable=False, default=45)
    equipment_required = Column(JSON, nullable=False, default=list)
    # [{"day_of_week": 1, "workout_name": "Push Day", "is_rest": false, "notes": null}, ...]
    schedule = Column(JSON, nullable=False, default=list)
    # [{"name": "Push Day", "estimated_minutes": 60, "exercises": [{...}]}, ...]
    workout_definitions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    @property
    def total_workouts(self) -> int:
        return self.duration_weeks * self.workouts_per_week

    def __repr__(self):
        return f"<ProgramTemplate(id={self.id}, name='{self.name}')>"


class UserProgram(Base):
    __tablename__ = "user_programs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    template_id = Column(Integer, ForeignKey("program_templates.id", ondelete="CASCADE"), nullable=False)
    status = Column(String(32), nullable=False, default=ProgramStatus.active.value, index=True)
    start_date = Column(Date, nullable=True)
    target_end_date = Column(Date, nullable=True)
    end_date = Column(DateTime, nullable=True)
    current_week = Column(Integer, nullable=False, default=1)
    current_day = Column(Integer, nullable=False, default=1)
    completed_workouts = Column(Integer, nullable=False, default=0)
    # {"week1": [1, 2, 4], "week2": [1, 3]}
    completed_days = Column(JSON, nullable=False, default=dict)
    notes = Column(String(512), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    template = relationship("ProgramTemplate", lazy="selectin")

    @property
    def is_active(self) -> bool:
        return self.status == ProgramStatus.active.value

    def schedule_from(self, start_date, duration_weeks: int) -> None:
        self.start_date = start_date
        self.target_end_date = start_date + timedelta(weeks=duration_weeks)

    def mark_day_completed(self, week: int, day: int) -> None:
        # JSON columns only track reassignment, so build a fresh mapping
        days = {key: list(values) for key, values in (self.completed_days or {}).items()}
        bucket = days.setdefault(week_key(week), [])
        if day not in bucket:
            bucket.append(day)
        self.completed_days = days

    def is_day_completed(self, week: int, day: int) -> bool:
        return day in (self.completed_days or {}).get(week_key(week), [])

    def __repr__(self):
        return (
            "<UserProgram("
            f"id={self.id}, template_id={self.template_id}, status={self.status}, "
            f"start_date={self.start_date})>"
        )
