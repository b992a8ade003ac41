from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from academy.auth.dependencies import get_current_user
from academy.core.config import settings
from academy.core.exceptions import ServiceError
from academy.core.reports import (
    ClassAttendanceSummary,
    DashboardSummary,
    class_attendance_summaries,
    dashboard_summary,
)
from academy.core.store import load_dataset
from academy.db.session import get_db

router = APIRouter(
    prefix="/api/v1/reports",
    tags=["reports"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(db: AsyncSession = Depends(get_db)) -> DashboardSummary:
    try:
        return dashboard_summary(await load_dataset(db))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/classes", response_model=List[ClassAttendanceSummary])
async def get_class_reports(db: AsyncSession = Depends(get_db)) -> List[ClassAttendanceSummary]:
    """Attendance totals and rate per class."""
    try:
        return class_attendance_summaries(await load_dataset(db), settings.max_sessions)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
