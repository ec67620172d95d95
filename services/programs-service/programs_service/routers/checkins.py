from datetime import date

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas as sm
from ..database import get_db
from ..dependencies import get_current_user_id
from ..services.checkin_service import CheckInService

router = APIRouter(prefix="/checkins")


def get_checkin_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> CheckInService:
    return CheckInService(db, user_id)


@router.post("/", response_model=sm.CheckInResponse, status_code=status.HTTP_201_CREATED)
async def record_checkin(
    payload: sm.CheckInCreate,
    response: Response,
    checkins: CheckInService = Depends(get_checkin_service),
):
    checkin, created = await checkins.record(payload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return sm.CheckInResponse.model_validate(checkin)


@router.get("/", response_model=list[sm.CheckInResponse])
async def list_checkins(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    checkins: CheckInService = Depends(get_checkin_service),
):
    found = await checkins.list_checkins(start_date, end_date)
    return [sm.CheckInResponse.model_validate(c) for c in found]


@router.get("/summary", response_model=sm.CheckInSummaryResponse)
async def checkin_summary(
    days: int = Query(30, ge=1, le=365),
    checkins: CheckInService = Depends(get_checkin_service),
):
    summary = await checkins.summary(days)
    return sm.CheckInSummaryResponse.model_validate(summary)
