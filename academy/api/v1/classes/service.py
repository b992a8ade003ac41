from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.config import settings
from academy.core.enums import RecordStatus
from academy.core.models import ClassOffering
from academy.core.sessions import class_session_dates, validate_date_range
from academy.core.store import storage_errors

from .schemas import ClassCreate, ClassResponse, ClassSessionsResponse, ClassUpdate

_REQUIRED_FIELDS = ("name", "start_date", "end_date", "status")


async def create_class(db: AsyncSession, payload: ClassCreate) -> ClassResponse:
    validate_date_range(payload.start_date, payload.end_date)
    obj = ClassOffering(
        name=payload.name.strip(),
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        max_capacity=payload.max_capacity,
        status=payload.status.value,
    )
    async with storage_errors(db, "creating class"):
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    return ClassResponse.model_validate(obj)


async def list_classes(db: AsyncSession, status: Optional[RecordStatus] = None) -> List[ClassResponse]:
    stmt = select(ClassOffering)
    if status is not None:
        stmt = stmt.where(ClassOffering.status == status.value)
    stmt = stmt.order_by(ClassOffering.start_date, ClassOffering.name)
    async with storage_errors(db, "listing classes"):
        rows = (await db.execute(stmt)).scalars().all()
    return [ClassResponse.model_validate(c) for c in rows]


async def get_class(db: AsyncSession, class_id: UUID) -> Optional[ClassResponse]:
    async with storage_errors(db, "loading class"):
        obj = await db.get(ClassOffering, class_id)
    return ClassResponse.model_validate(obj) if obj else None


async def update_class(
    db: AsyncSession,
    class_id: UUID,
    payload: ClassUpdate,
) -> Optional[ClassResponse]:
    async with storage_errors(db, "updating class"):
        obj = await db.get(ClassOffering, class_id)
        if not obj:
            return None
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field not in _REQUIRED_FIELDS
        }
        validate_date_range(
            changes.get("start_date", obj.start_date),
            changes.get("end_date", obj.end_date),
        )
        for field, value in changes.items():
            if isinstance(value, RecordStatus):
                value = value.value
            elif field == "name":
                value = value.strip()
            setattr(obj, field, value)
        await db.commit()
        await db.refresh(obj)
    return ClassResponse.model_validate(obj)


async def archive_class(db: AsyncSession, class_id: UUID) -> Optional[ClassResponse]:
    return await update_class(db, class_id, ClassUpdate(status=RecordStatus.ARCHIVED))


async def get_class_sessions(db: AsyncSession, class_id: UUID) -> Optional[ClassSessionsResponse]:
    obj = await get_class(db, class_id)
    if not obj:
        return None
    return ClassSessionsResponse(
        class_id=obj.id,
        dates=class_session_dates(obj.start_date, obj.end_date, settings.max_sessions),
    )
