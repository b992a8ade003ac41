import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enums import RecordStatus
from academy.core.models import Student
from academy.core.store import storage_errors

from .importer import generate_placeholder_code
from .schemas import StudentCreate, StudentResponse, StudentUpdate

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("student_code", "full_name", "status")


def _escape_like(term: str) -> str:
    """Match % and _ in search text literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    code = (payload.student_code or "").strip() or generate_placeholder_code()
    obj = Student(
        student_code=code,
        full_name=payload.full_name.strip(),
        email=payload.email,
        phone=payload.phone,
        status=payload.status.value,
    )
    async with storage_errors(db, "creating student"):
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    return StudentResponse.model_validate(obj)


async def create_students_bulk(db: AsyncSession, payload: List[StudentCreate]) -> List[StudentResponse]:
    """Create all students in one commit."""
    if not payload:
        return []
    created = []
    async with storage_errors(db, "importing students"):
        for item in payload:
            obj = Student(
                student_code=(item.student_code or "").strip() or generate_placeholder_code(),
                full_name=item.full_name.strip(),
                email=item.email,
                phone=item.phone,
                status=item.status.value,
            )
            db.add(obj)
            created.append(obj)
        await db.commit()
        for obj in created:
            await db.refresh(obj)
    logger.info("Imported %d students", len(created))
    return [StudentResponse.model_validate(s) for s in created]


async def list_students(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[RecordStatus] = None,
) -> List[StudentResponse]:
    """All students, optionally filtered by name/email/code substring and status."""
    stmt = select(Student)
    if search and search.strip():
        pattern = f"%{_escape_like(search.strip().lower())}%"
        stmt = stmt.where(
            or_(
                func.lower(Student.full_name).like(pattern, escape="\\"),
                func.lower(Student.email).like(pattern, escape="\\"),
                func.lower(Student.student_code).like(pattern, escape="\\"),
            )
        )
    if status is not None:
        stmt = stmt.where(Student.status == status.value)
    stmt = stmt.order_by(Student.full_name)
    async with storage_errors(db, "listing students"):
        rows = (await db.execute(stmt)).scalars().all()
    return [StudentResponse.model_validate(s) for s in rows]


async def get_student(db: AsyncSession, student_id: UUID) -> Optional[StudentResponse]:
    async with storage_errors(db, "loading student"):
        obj = await db.get(Student, student_id)
    return StudentResponse.model_validate(obj) if obj else None


async def update_student(
    db: AsyncSession,
    student_id: UUID,
    payload: StudentUpdate,
) -> Optional[StudentResponse]:
    async with storage_errors(db, "updating student"):
        obj = await db.get(Student, student_id)
        if not obj:
            return None
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            if isinstance(value, RecordStatus):
                value = value.value
            elif isinstance(value, str):
                value = value.strip()
            setattr(obj, field, value)
        await db.commit()
        await db.refresh(obj)
    return StudentResponse.model_validate(obj)


async def archive_student(db: AsyncSession, student_id: UUID) -> Optional[StudentResponse]:
    return await update_student(db, student_id, StudentUpdate(status=RecordStatus.ARCHIVED))
