from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from academy.core.enums import RecordStatus


class StudentCreate(BaseModel):
    student_code: Optional[str] = Field(None, max_length=50, description="Generated when omitted")
    full_name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    status: RecordStatus = RecordStatus.ACTIVE


class StudentUpdate(BaseModel):
    """Partial update: only fields present in the body are written."""

    student_code: Optional[str] = Field(None, max_length=50)
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    status: Optional[RecordStatus] = None


class StudentResponse(BaseModel):
    id: UUID
    student_code: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StudentImportFailure(BaseModel):
    """Row that was not imported, with the reason."""

    row: int
    full_name: Optional[str] = None
    reason: str


class StudentImportWarning(BaseModel):
    """Imported row whose value for one column was dropped."""

    row: int
    full_name: str
    field: str
    value: Optional[str] = None
    reason: str


class StudentImportResponse(BaseModel):
    created: List[StudentResponse]
    skipped: List[StudentImportFailure] = Field(default_factory=list)
    warnings: List[StudentImportWarning] = Field(default_factory=list)
