from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base, utcnow


class PersonalRecord(Base):
    """Heaviest set a user has logged for an exercise at the time it was lifted."""

    __tablename__ = "personal_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_name = Column(String(120), nullable=False)
    weight = Column(Float, nullable=False)
    reps = Column(Integer, nullable=False)
    previous_weight = Column(Float, nullable=True)
    achieved_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    session_id = Column(Integer, ForeignKey("workout_sessions.id", ondelete="SET NULL"), nullable=True)

    session = relationship("WorkoutSession", back_populates="personal_records")

    @property
    def improvement_percentage(self) -> float | None:
        if not self.previous_weight:
            return None
        return round((self.weight - self.previous_weight) / self.previous_weight * 100, 2)

    def __repr__(self):
        return f"<PersonalRecord(id={self.id}, exercise='{self.exercise_name}', weight={self.weight})>"
