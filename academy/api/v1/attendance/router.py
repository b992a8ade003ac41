"""Attendance API router."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.auth.dependencies import get_current_user
from academy.core.exceptions import ServiceError
from academy.db.session import get_db

from . import service
from .schemas import (
    AttendanceCellAdvance,
    AttendanceCellResponse,
    AttendanceGridResponse,
    AttendanceResponse,
    AttendanceUpsert,
)

router = APIRouter(
    prefix="/api/v1/attendance",
    tags=["attendance"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[AttendanceResponse])
async def list_attendance(
    class_id: Optional[UUID] = Query(None),
    student_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[AttendanceResponse]:
    try:
        return await service.list_attendance(db, class_id=class_id, student_id=student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("", response_model=Optional[AttendanceResponse])
async def upsert_attendance(
    payload: AttendanceUpsert,
    db: AsyncSession = Depends(get_db),
):
    """Set status/notes of one (student, class, date) cell. Empty status clears it."""
    try:
        record = await service.upsert_attendance(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if record is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return record


@router.delete("/{attendance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attendance(
    attendance_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await service.delete_attendance_record(db, attendance_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attendance record not found")


@router.get("/grid/{class_id}", response_model=AttendanceGridResponse)
async def get_attendance_grid(
    class_id: UUID,
    makeup_dates: List[date] = Query([], description="Extra session dates shown as columns; not stored"),
    db: AsyncSession = Depends(get_db),
) -> AttendanceGridResponse:
    """Enrolled students x (weekly sessions + makeup dates) for one class."""
    try:
        return await service.get_attendance_grid(db, class_id, makeup_dates)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/grid/{class_id}/advance", response_model=AttendanceCellResponse)
async def advance_attendance_cell(
    class_id: UUID,
    payload: AttendanceCellAdvance,
    db: AsyncSession = Depends(get_db),
) -> AttendanceCellResponse:
    """Cycle a cell: unset, present, absent, late, excused, unset."""
    try:
        return await service.advance_attendance_cell(db, class_id, payload.student_id, payload.date)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
