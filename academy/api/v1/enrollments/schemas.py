from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class EnrollmentCreate(BaseModel):
    student_id: UUID
    class_id: UUID


class EnrollmentResponse(BaseModel):
    id: UUID
    student_id: UUID
    class_id: UUID
    created_at: datetime

    class Config:
        from_attributes = True
