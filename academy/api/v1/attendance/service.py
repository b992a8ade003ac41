"""Attendance records and the per-class attendance grid."""

import logging
from datetime import date
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.config import settings
from academy.core.enums import AttendanceStatus, CellAction
from academy.core.exceptions import MissingReference
from academy.core.matrix import AttendanceMatrix
from academy.core.models import AttendanceRecord, ClassOffering, Student
from academy.core.store import (
    apply_cell_change,
    delete_attendance,
    load_dataset,
    save_attendance,
    storage_errors,
)

from .schemas import (
    AttendanceCellResponse,
    AttendanceGridResponse,
    AttendanceGridRow,
    AttendanceResponse,
    AttendanceUpsert,
)

logger = logging.getLogger(__name__)


async def list_attendance(
    db: AsyncSession,
    class_id: Optional[UUID] = None,
    student_id: Optional[UUID] = None,
) -> List[AttendanceResponse]:
    stmt = select(AttendanceRecord)
    if class_id is not None:
        stmt = stmt.where(AttendanceRecord.class_id == class_id)
    if student_id is not None:
        stmt = stmt.where(AttendanceRecord.student_id == student_id)
    stmt = stmt.order_by(AttendanceRecord.date)
    async with storage_errors(db, "listing attendance"):
        rows = (await db.execute(stmt)).scalars().all()
    return [AttendanceResponse.model_validate(r) for r in rows]


async def upsert_attendance(db: AsyncSession, payload: AttendanceUpsert) -> Optional[AttendanceResponse]:
    """Create or update the record of one cell. Returns None when the cell was cleared."""
    async with storage_errors(db, "checking attendance references"):
        if not await db.get(Student, payload.student_id):
            raise MissingReference("Student not found")
        if not await db.get(ClassOffering, payload.class_id):
            raise MissingReference("Class not found")
    if payload.status is AttendanceStatus.UNSET:
        await delete_attendance(db, payload.student_id, payload.class_id, payload.date)
        return None
    record = await save_attendance(
        db,
        payload.student_id,
        payload.class_id,
        payload.date,
        payload.status,
        notes=payload.notes,
    )
    return AttendanceResponse.model_validate(record)


async def delete_attendance_record(db: AsyncSession, attendance_id: UUID) -> bool:
    async with storage_errors(db, "deleting attendance"):
        record = await db.get(AttendanceRecord, attendance_id)
        if not record:
            return False
        await db.delete(record)
        await db.commit()
    return True


async def get_attendance_grid(
    db: AsyncSession,
    class_id: UUID,
    makeup_dates: Iterable[date] = (),
) -> AttendanceGridResponse:
    dataset = await load_dataset(db)
    matrix = AttendanceMatrix(dataset, class_id, makeup_dates, max_sessions=settings.max_sessions)
    return AttendanceGridResponse(
        class_id=matrix.class_id,
        class_name=matrix.class_info.name,
        dates=matrix.dates,
        makeup_dates=sorted(matrix.makeup_dates),
        rows=[
            AttendanceGridRow(
                student_id=row["student"].id,
                student_code=row["student"].student_code,
                student_name=row["student"].full_name,
                statuses=row["cells"],
            )
            for row in matrix.rows()
        ],
    )


async def advance_attendance_cell(
    db: AsyncSession,
    class_id: UUID,
    student_id: UUID,
    att_date: date,
) -> AttendanceCellResponse:
    """Cycle a cell to its next status and persist the resulting change."""
    dataset = await load_dataset(db)
    matrix = AttendanceMatrix(dataset, class_id, max_sessions=settings.max_sessions)
    change = matrix.advance_status(student_id, att_date)
    await apply_cell_change(db, change)
    cleared = change.action is CellAction.DELETE
    logger.info(
        "Attendance %s for student %s class %s on %s: %s",
        change.action.value, student_id, class_id, att_date,
        "cleared" if cleared else change.record.status.value,
    )
    return AttendanceCellResponse(
        student_id=student_id,
        class_id=class_id,
        date=att_date,
        status=AttendanceStatus.UNSET if cleared else change.record.status,
        action=change.action,
        record_id=None if cleared else change.record.id,
    )
