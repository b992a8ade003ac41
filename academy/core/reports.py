"""Dashboard counters and per-class attendance totals."""

from collections import Counter
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from academy.core.absences import aggregate_absences
from academy.core.enums import AttendanceStatus, RecordStatus
from academy.core.schemas import Dataset
from academy.core.sessions import MAX_SESSIONS, class_session_dates


class DashboardSummary(BaseModel):
    active_students: int
    active_classes: int
    enrollments: int
    attendance_records: int
    students_needing_makeup: int


class ClassAttendanceSummary(BaseModel):
    class_id: UUID
    class_name: str
    enrolled: int
    sessions: int
    present: int
    absent: int
    late: int
    excused: int
    attendance_rate: Optional[float] = None  # percent of marked cells that are Present or Late


def dashboard_summary(dataset: Dataset) -> DashboardSummary:
    return DashboardSummary(
        active_students=sum(1 for s in dataset.students if s.status == RecordStatus.ACTIVE.value),
        active_classes=sum(1 for c in dataset.classes if c.status == RecordStatus.ACTIVE.value),
        enrollments=len(dataset.enrollments),
        attendance_records=len(dataset.attendance),
        students_needing_makeup=len({e.student.id for e in aggregate_absences(dataset)}),
    )


def class_attendance_summaries(dataset: Dataset, max_sessions: int = MAX_SESSIONS) -> List[ClassAttendanceSummary]:
    summaries = []
    for class_info in dataset.classes:
        enrolled_ids = {s.id for s in dataset.enrolled_students(class_info.id)}
        counts = Counter(
            r.status
            for r in dataset.attendance
            if r.class_id == class_info.id and r.student_id in enrolled_ids
        )
        marked = sum(counts.values())
        attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE]
        summaries.append(
            ClassAttendanceSummary(
                class_id=class_info.id,
                class_name=class_info.name,
                enrolled=len(enrolled_ids),
                sessions=len(class_session_dates(class_info.start_date, class_info.end_date, max_sessions)),
                present=counts[AttendanceStatus.PRESENT],
                absent=counts[AttendanceStatus.ABSENT],
                late=counts[AttendanceStatus.LATE],
                excused=counts[AttendanceStatus.EXCUSED],
                attendance_rate=round(attended * 100 / marked, 1) if marked else None,
            )
        )
    return summaries
