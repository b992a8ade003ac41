"""In-memory snapshot of the academy dataset. Core functions read these, never the ORM."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from academy.core.enums import AttendanceStatus, CellAction


class StudentInfo(BaseModel):
    id: UUID
    student_code: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str = "Active"

    class Config:
        from_attributes = True


class ClassInfo(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    max_capacity: Optional[int] = None
    status: str = "Active"

    class Config:
        from_attributes = True


class EnrollmentInfo(BaseModel):
    id: UUID
    student_id: UUID
    class_id: UUID

    class Config:
        from_attributes = True


class AttendanceInfo(BaseModel):
    id: UUID
    student_id: UUID
    class_id: UUID
    date: date
    status: AttendanceStatus
    notes: str = ""

    class Config:
        from_attributes = True


class Dataset(BaseModel):
    """Whole-dataset snapshot, loaded at once and re-derived from on every request."""

    students: List[StudentInfo] = Field(default_factory=list)
    classes: List[ClassInfo] = Field(default_factory=list)
    enrollments: List[EnrollmentInfo] = Field(default_factory=list)
    attendance: List[AttendanceInfo] = Field(default_factory=list)

    def find_student(self, student_id: UUID) -> Optional[StudentInfo]:
        return next((s for s in self.students if s.id == student_id), None)

    def find_class(self, class_id: UUID) -> Optional[ClassInfo]:
        return next((c for c in self.classes if c.id == class_id), None)

    def enrolled_students(self, class_id: UUID) -> List[StudentInfo]:
        """Students enrolled in a class, in enrollment order. Dangling student refs are dropped."""
        students = []
        for enrollment in self.enrollments:
            if enrollment.class_id != class_id:
                continue
            student = self.find_student(enrollment.student_id)
            if student is not None:
                students.append(student)
        return students


class CellChange(BaseModel):
    """Storage mutation requested by an attendance grid edit."""

    action: CellAction
    record: AttendanceInfo


class AbsenceEntry(BaseModel):
    """All Absent dates of one student in one class."""

    student: StudentInfo
    class_info: ClassInfo = Field(..., alias="class")
    absent_dates: List[str]
    total_absences: int

    class Config:
        populate_by_name = True


class TimeSlot(BaseModel):
    """Proposed makeup session. Either field may be blank in user-entered slots."""

    slot_date: Optional[date] = Field(None, alias="date")
    time: str = ""

    class Config:
        populate_by_name = True

    @field_validator("slot_date", mode="before")
    @classmethod
    def blank_date_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AcademyContact(BaseModel):
    """Static footer details of outgoing emails."""

    name: str
    phone: str
    email: str
    address: str
