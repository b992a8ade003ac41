from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from academy.core.enums import RecordStatus


class ClassCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: date
    end_date: date
    max_capacity: Optional[int] = Field(None, ge=1)
    status: RecordStatus = RecordStatus.ACTIVE


class ClassUpdate(BaseModel):
    """Partial update: only fields present in the body are written."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    max_capacity: Optional[int] = Field(None, ge=1)
    status: Optional[RecordStatus] = None


class ClassResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    max_capacity: Optional[int] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ClassSessionsResponse(BaseModel):
    """Regular weekly session dates of a class (display-capped)."""

    class_id: UUID
    dates: List[str]
