from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas as sm
from ..database import get_db
from ..dependencies import get_current_user_id
from ..services.personal_records import PersonalRecordService

router = APIRouter(prefix="/records")


def get_record_service(
    db: AsyncSession = Depends(get_db), user_id: str = Depends(get_current_user_id)
) -> PersonalRecordService:
    return PersonalRecordService(db, user_id)


@router.get("/", response_model=list[sm.PersonalRecordResponse])
async def list_records(
    exercise_id: int | None = Query(None),
    days: int | None = Query(None, ge=1, le=3650, description="Only records from the last N days"),
    records: PersonalRecordService = Depends(get_record_service),
):
    found = await records.list_records(exercise_id=exercise_id, days=days)
    return [sm.PersonalRecordResponse.model_validate(r) for r in found]


@router.get("/exercises/{exercise_id}/best", response_model=sm.PersonalRecordResponse)
async def best_record(exercise_id: int, records: PersonalRecordService = Depends(get_record_service)):
    record = await records.get_best(exercise_id)
    return sm.PersonalRecordResponse.model_validate(record)
