from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from academy.core.enums import AttendanceStatus, CellAction


class AttendanceUpsert(BaseModel):
    """Set one cell. An empty status clears the cell (deletes the record)."""

    student_id: UUID
    class_id: UUID
    date: date
    status: AttendanceStatus = Field(..., description="P, A, L, E or empty to clear")
    notes: Optional[str] = None


class AttendanceResponse(BaseModel):
    id: UUID
    student_id: UUID
    class_id: UUID
    date: date
    status: str
    notes: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AttendanceCellAdvance(BaseModel):
    """Click on a grid cell: move it to the next status."""

    student_id: UUID
    date: date


class AttendanceCellResponse(BaseModel):
    student_id: UUID
    class_id: UUID
    date: date
    status: AttendanceStatus
    action: CellAction
    record_id: Optional[UUID] = None  # None once the cell is cleared


class AttendanceGridRow(BaseModel):
    student_id: UUID
    student_code: str
    student_name: str
    statuses: List[AttendanceStatus]  # aligned with AttendanceGridResponse.dates


class AttendanceGridResponse(BaseModel):
    class_id: UUID
    class_name: str
    dates: List[str]
    makeup_dates: List[str]
    rows: List[AttendanceGridRow]
