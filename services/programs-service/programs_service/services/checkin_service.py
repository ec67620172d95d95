from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import utcnow
from ..metrics import DAILY_CHECKINS_TOTAL
from ..models import DailyCheckIn
from ..schemas.checkin import CheckInCreate

logger = structlog.get_logger(__name__)


def _average(values: list[int]) -> float | None:
    return round(sum(values) / len(values), 2) if values else None


def checkin_streak(dates: set[date], today: date) -> int:
    """Consecutive check-in days ending today, or yesterday when today is still open."""
    day = today if today in dates else today - timedelta(days=1)
    streak = 0
    while day in dates:
        streak += 1
        day -= timedelta(days=1)
    return streak


@dataclass
class CheckInSummary:
    start_date: date
    end_date: date
    total_checkins: int
    current_streak: int
    mood_breakdown: dict[str, int] = field(default_factory=dict)
    average_mood_score: float | None = None
    average_energy: float | None = None
    average_stress: float | None = None
    average_soreness: float | None = None


class CheckInService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def _for_date(self, checkin_date: date) -> DailyCheckIn | None:
        result = await self.db.execute(
            select(DailyCheckIn).where(
                DailyCheckIn.user_id == self.user_id, DailyCheckIn.checkin_date == checkin_date
            )
        )
        return result.scalars().first()

    async def record(self, payload: CheckInCreate) -> tuple[DailyCheckIn, bool]:
        """Save the check-in for its day. A second check-in on the same day replaces the first."""
        checkin_date = payload.checkin_date or utcnow().date()
        checkin = await self._for_date(checkin_date)
        created = checkin is None
        if created:
            checkin = DailyCheckIn(user_id=self.user_id, checkin_date=checkin_date)
            self.db.add(checkin)

        checkin.mood = payload.mood.value
        checkin.energy_level = payload.energy_level
        checkin.stress_level = payload.stress_level
        checkin.soreness_level = payload.soreness_level
        checkin.notes = payload.notes
        checkin.tags = list(payload.tags)
        await self.db.commit()
        await self.db.refresh(checkin)

        mode = "created" if created else "updated"
        DAILY_CHECKINS_TOTAL.labels(mode=mode).inc()
        logger.info("daily_checkin_recorded", user_id=self.user_id, checkin_date=str(checkin_date), mode=mode)
        return checkin, created

    async def list_checkins(self, start_date: date | None = None, end_date: date | None = None) -> list[DailyCheckIn]:
        stmt = select(DailyCheckIn).where(DailyCheckIn.user_id == self.user_id)
        if start_date is not None:
            stmt = stmt.where(DailyCheckIn.checkin_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(DailyCheckIn.checkin_date <= end_date)
        result = await self.db.execute(stmt.order_by(DailyCheckIn.checkin_date.desc()))
        return list(result.scalars().all())

    async def summary(self, days: int = 30, today: date | None = None) -> CheckInSummary:
        today = today or utcnow().date()
        start = today - timedelta(days=days - 1)
        window = await self.list_checkins(start, today)

        # The streak may reach back past the window
        result = await self.db.execute(
            select(DailyCheckIn.checkin_date).where(
                DailyCheckIn.user_id == self.user_id, DailyCheckIn.checkin_date <= today
            )
        )
        all_dates = set(result.scalars().all())

        return CheckInSummary(
            start_date=start,
            end_date=today,
            total_checkins=len(window),
            current_streak=checkin_streak(all_dates, today),
            mood_breakdown=dict(Counter(c.mood for c in window)),
            average_mood_score=_average([c.mood_score for c in window]),
            average_energy=_average([c.energy_level for c in window if c.energy_level is not None]),
            average_stress=_average([c.stress_level for c in window if c.stress_level is not None]),
            average_soreness=_average([c.soreness_level for c in window if c.soreness_level is not None]),
        )
