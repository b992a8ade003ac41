from academy.core.models.attendance_record import AttendanceRecord
from academy.core.models.class_offering import ClassOffering
from academy.core.models.enrollment import Enrollment
from academy.core.models.student import Student

__all__ = [
    "AttendanceRecord",
    "ClassOffering",
    "Enrollment",
    "Student",
]
