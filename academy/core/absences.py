"""Students who missed sessions, ranked by how many."""

import logging
from typing import List

from academy.core.enums import AttendanceStatus
from academy.core.schemas import AbsenceEntry, Dataset

logger = logging.getLogger(__name__)


def aggregate_absences(dataset: Dataset) -> List[AbsenceEntry]:
    """Absence entries for every (class, enrolled student) with at least one Absent record.

    Sorted by absence count, highest first. Ties keep class order, then
    enrollment order (``sorted`` is stable).
    """
    entries: List[AbsenceEntry] = []
    for class_info in dataset.classes:
        for enrollment in dataset.enrollments:
            if enrollment.class_id != class_info.id:
                continue
            student = dataset.find_student(enrollment.student_id)
            if student is None:
                logger.debug("Skipping enrollment %s: student %s not found", enrollment.id, enrollment.student_id)
                continue
            absent_dates = [
                r.date.isoformat()
                for r in dataset.attendance
                if r.student_id == student.id
                and r.class_id == class_info.id
                and r.status == AttendanceStatus.ABSENT
            ]
            if absent_dates:
                entries.append(
                    AbsenceEntry(
                        student=student,
                        class_info=class_info,
                        absent_dates=absent_dates,
                        total_absences=len(absent_dates),
                    )
                )
    return sorted(entries, key=lambda e: e.total_absences, reverse=True)
