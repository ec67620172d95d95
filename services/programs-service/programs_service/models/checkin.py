from sqlalchemy import JSON, Column, Date, DateTime, Integer, String, Text, UniqueConstraint

from ..database import Base, utcnow
from .enums import MOOD_SCORES


class DailyCheckIn(Base):
    __tablename__ = "daily_checkins"
    __table_args__ = (UniqueConstraint("user_id", "checkin_date", name="uq_daily_checkin_user_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    checkin_date = Column(Date, nullable=False, index=True)
    mood = Column(String(32), nullable=False)
    # 1-10 scales, all optional
    energy_level = Column(Integer, nullable=True)
    stress_level = Column(Integer, nullable=True)
    soreness_level = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def mood_score(self) -> int:
        return MOOD_SCORES.get(self.mood, 0)

    def __repr__(self):
        return f"<DailyCheckIn(id={self.id}, user_id='{self.user_id}', date={self.checkin_date}, mood={self.mood})>"
