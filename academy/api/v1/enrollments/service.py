from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import MissingReference, ServiceError
from academy.core.models import ClassOffering, Enrollment, Student
from academy.core.store import storage_errors

from .schemas import EnrollmentCreate, EnrollmentResponse


async def create_enrollment(db: AsyncSession, payload: EnrollmentCreate) -> EnrollmentResponse:
    """Enroll a student in a class. Rejects unknown references, duplicates and full classes."""
    try:
        async with storage_errors(db, "creating enrollment"):
            if not await db.get(Student, payload.student_id):
                raise MissingReference("Student not found")
            class_obj = await db.get(ClassOffering, payload.class_id)
            if not class_obj:
                raise MissingReference("Class not found")
            if class_obj.max_capacity is not None:
                enrolled = (await db.execute(
                    select(func.count(Enrollment.id)).where(Enrollment.class_id == payload.class_id)
                )).scalar_one()
                if enrolled >= class_obj.max_capacity:
                    raise ServiceError("Class is full", status.HTTP_400_BAD_REQUEST)
            obj = Enrollment(student_id=payload.student_id, class_id=payload.class_id)
            db.add(obj)
            await db.commit()
            await db.refresh(obj)
    except IntegrityError:
        raise ServiceError("Student is already enrolled in this class", status.HTTP_409_CONFLICT)
    return EnrollmentResponse.model_validate(obj)


async def list_enrollments(db: AsyncSession, class_id: Optional[UUID] = None) -> List[EnrollmentResponse]:
    stmt = select(Enrollment)
    if class_id is not None:
        stmt = stmt.where(Enrollment.class_id == class_id)
    stmt = stmt.order_by(Enrollment.created_at)
    async with storage_errors(db, "listing enrollments"):
        rows = (await db.execute(stmt)).scalars().all()
    return [EnrollmentResponse.model_validate(e) for e in rows]
