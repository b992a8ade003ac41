from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from academy.auth.dependencies import get_current_user
from academy.core.exceptions import ServiceError
from academy.core.schemas import AbsenceEntry
from academy.db.session import get_db

from . import service
from .schemas import MakeupEmailRequest, MakeupEmailResponse, TimeSlotsResponse

router = APIRouter(
    prefix="/api/v1/makeup",
    tags=["makeup"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/suggestions", response_model=List[AbsenceEntry])
async def list_makeup_suggestions(
    db: AsyncSession = Depends(get_db),
) -> List[AbsenceEntry]:
    """Students with absences per class, most absences first."""
    try:
        return await service.list_makeup_suggestions(db)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/time-slots", response_model=TimeSlotsResponse)
async def get_time_slots(
    reference_date: Optional[date] = Query(None, description="Defaults to today"),
) -> TimeSlotsResponse:
    """The next three makeup-day slots."""
    return service.get_time_slots(reference_date)


@router.post("/email", response_model=MakeupEmailResponse)
async def compose_makeup_email(
    payload: MakeupEmailRequest,
    db: AsyncSession = Depends(get_db),
) -> MakeupEmailResponse:
    try:
        return await service.compose_email(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
