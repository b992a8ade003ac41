from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.auth.dependencies import get_current_user
from academy.core.exceptions import ServiceError
from academy.db.session import get_db

from . import service
from .schemas import EnrollmentCreate, EnrollmentResponse

router = APIRouter(
    prefix="/api/v1/enrollments",
    tags=["enrollments"],
    dependencies=[Depends(get_current_user)],
)


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    payload: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    try:
        return await service.create_enrollment(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[EnrollmentResponse])
async def list_enrollments(
    class_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[EnrollmentResponse]:
    try:
        return await service.list_enrollments(db, class_id=class_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
