from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from academy.auth.dependencies import get_current_user, require_admin
from academy.core.enums import RecordStatus
from academy.core.exceptions import ServiceError
from academy.db.session import get_db

from . import importer, service
from .schemas import (
    StudentCreate,
    StudentImportResponse,
    StudentResponse,
    StudentUpdate,
)

router = APIRouter(
    prefix="/api/v1/students",
    tags=["students"],
    dependencies=[Depends(get_current_user)],
)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("", response_model=List[StudentResponse])
async def list_students(
    search: Optional[str] = Query(None, description="Match on name, email or student code"),
    status_filter: Optional[RecordStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> List[StudentResponse]:
    try:
        return await service.list_students(db, search=search, status=status_filter)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        return await service.create_student(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/import",
    response_model=StudentImportResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def import_students(
    file: UploadFile = File(..., description="CSV or .xlsx: Student ID, Full Name, Email, Phone"),
    db: AsyncSession = Depends(get_db),
) -> StudentImportResponse:
    """Bulk create students. Nameless rows are skipped; bad optional values are dropped with a warning."""
    content = await file.read()
    filename = (file.filename or "").lower()
    try:
        if filename.endswith(".xlsx"):
            parsed = importer.parse_students_excel(content)
        else:
            parsed = importer.parse_students_csv(content.decode("utf-8-sig"))
    except (ValueError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    try:
        created = await service.create_students_bulk(db, parsed.students)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return StudentImportResponse(created=created, skipped=parsed.skipped, warnings=parsed.warnings)


@router.get("/import/template")
async def download_import_template() -> Response:
    return Response(
        content=importer.build_student_upload_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="students_template.xlsx"'},
    )


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        obj = await service.get_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return obj


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        obj = await service.update_student(db, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return obj


@router.post(
    "/{student_id}/archive",
    response_model=StudentResponse,
    dependencies=[Depends(require_admin)],
)
async def archive_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        obj = await service.archive_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return obj
