"""
Persistence store: loads the whole dataset snapshot and writes single-entity changes.

- Every read or write failure is rolled back and raised as UpstreamIOError so
  routers can answer 503 and the client can retry.
- Integrity violations (duplicate enrollment etc.) stay IntegrityError for the
  caller to map to 409.
"""
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enums import AttendanceStatus, CellAction
from academy.core.exceptions import UpstreamIOError
from academy.core.models import AttendanceRecord, ClassOffering, Enrollment, Student
from academy.core.schemas import (
    AttendanceInfo,
    CellChange,
    ClassInfo,
    Dataset,
    EnrollmentInfo,
    StudentInfo,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def storage_errors(db: AsyncSession, action: str) -> AsyncIterator[None]:
    """Roll back and raise UpstreamIOError on database failure. IntegrityError passes through."""
    try:
        yield
    except IntegrityError:
        await db.rollback()
        raise
    except SQLAlchemyError:
        logger.exception("Storage failure while %s", action)
        await db.rollback()
        raise UpstreamIOError()


async def load_dataset(db: AsyncSession) -> Dataset:
    """Load all students, classes, enrollments and attendance in one go."""
    async with storage_errors(db, "loading dataset"):
        students = (await db.execute(select(Student).order_by(Student.created_at))).scalars().all()
        classes = (await db.execute(select(ClassOffering).order_by(ClassOffering.created_at))).scalars().all()
        enrollments = (await db.execute(select(Enrollment).order_by(Enrollment.created_at))).scalars().all()
        attendance = (await db.execute(select(AttendanceRecord).order_by(AttendanceRecord.date))).scalars().all()
    return Dataset(
        students=[StudentInfo.model_validate(s) for s in students],
        classes=[ClassInfo.model_validate(c) for c in classes],
        enrollments=[EnrollmentInfo.model_validate(e) for e in enrollments],
        attendance=[AttendanceInfo.model_validate(a) for a in attendance],
    )


async def find_attendance(
    db: AsyncSession,
    student_id: UUID,
    class_id: UUID,
    att_date: date,
) -> Optional[AttendanceRecord]:
    result = await db.execute(
        select(AttendanceRecord).where(
            AttendanceRecord.student_id == student_id,
            AttendanceRecord.class_id == class_id,
            AttendanceRecord.date == att_date,
        )
    )
    return result.scalar_one_or_none()


async def save_attendance(
    db: AsyncSession,
    student_id: UUID,
    class_id: UUID,
    att_date: date,
    status: AttendanceStatus,
    notes: Optional[str] = None,
    record_id: Optional[UUID] = None,
) -> AttendanceRecord:
    """Upsert by (student, class, date): update status/notes if the row exists, else insert."""
    async with storage_errors(db, "saving attendance"):
        record = await find_attendance(db, student_id, class_id, att_date)
        if record is not None:
            record.status = status.value
            if notes is not None:
                record.notes = notes
        else:
            record = AttendanceRecord(
                student_id=student_id,
                class_id=class_id,
                date=att_date,
                status=status.value,
                notes=notes or "",
            )
            if record_id is not None:
                record.id = record_id
            db.add(record)
        await db.commit()
        await db.refresh(record)
    return record


async def delete_attendance(db: AsyncSession, student_id: UUID, class_id: UUID, att_date: date) -> bool:
    async with storage_errors(db, "deleting attendance"):
        result = await db.execute(
            delete(AttendanceRecord).where(
                AttendanceRecord.student_id == student_id,
                AttendanceRecord.class_id == class_id,
                AttendanceRecord.date == att_date,
            )
        )
        await db.commit()
    return result.rowcount > 0


async def apply_cell_change(db: AsyncSession, change: CellChange) -> None:
    """Persist a change produced by AttendanceMatrix.advance_status."""
    rec = change.record
    if change.action is CellAction.DELETE:
        await delete_attendance(db, rec.student_id, rec.class_id, rec.date)
        return
    await save_attendance(
        db,
        rec.student_id,
        rec.class_id,
        rec.date,
        rec.status,
        record_id=rec.id if change.action is CellAction.CREATE else None,
    )
