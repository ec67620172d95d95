from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from ..database import Base, utcnow
from .enums import Difficulty, Equipment, ExerciseCategory, ExerciseLocation, MuscleGroup


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    # Identity is case-insensitive; lookups compare lower(name)
    name = Column(String(120), nullable=False, index=True)
    muscle_group = Column(String(32), nullable=False, default=MuscleGroup.full_body.value)
    category = Column(String(32), nullable=False, default=ExerciseCategory.strength.value)
    difficulty = Column(String(32), nullable=False, default=Difficulty.intermediate.value)
    equipment = Column(String(32), nullable=False, default=Equipment.bodyweight.value)
    location = Column(String(32), nullable=False, default=ExerciseLocation.anywhere.value)
    is_favorite = Column(Boolean, nullable=False, default=False)
    instructions = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Exercise(id={self.id}, name='{self.name}')>"
