"""Attendance grid of one class: enrolled students x session dates."""

import logging
import uuid
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from academy.core.enums import AttendanceStatus, CellAction
from academy.core.exceptions import MissingReference
from academy.core.schemas import AttendanceInfo, CellChange, ClassInfo, Dataset, StudentInfo
from academy.core.sessions import MAX_SESSIONS, DateLike, class_session_dates, parse_session_date

logger = logging.getLogger(__name__)


class AttendanceMatrix:
    """Projection of a dataset snapshot onto one class.

    Holds no cell storage of its own: every lookup goes back to
    ``dataset.attendance``. Makeup dates are local to this object and never
    written anywhere.
    """

    def __init__(
        self,
        dataset: Dataset,
        class_id: UUID,
        makeup_dates: Iterable[DateLike] = (),
        max_sessions: int = MAX_SESSIONS,
    ) -> None:
        class_info = dataset.find_class(class_id)
        if class_info is None:
            raise MissingReference("Class not found")
        self.dataset = dataset
        self.class_info: ClassInfo = class_info
        self.regular_dates = class_session_dates(class_info.start_date, class_info.end_date, max_sessions)
        self.makeup_dates: List[str] = []
        for makeup in makeup_dates:
            self.add_makeup_date(makeup)

    @property
    def class_id(self) -> UUID:
        return self.class_info.id

    @property
    def dates(self) -> List[str]:
        """Regular and makeup dates, de-duplicated, ascending."""
        return sorted(set(self.regular_dates) | set(self.makeup_dates))

    @property
    def students(self) -> List[StudentInfo]:
        return self.dataset.enrolled_students(self.class_id)

    def add_makeup_date(self, value: DateLike) -> None:
        """Add an extra column. Dates already in the weekly sequence are ignored."""
        iso = parse_session_date(value).isoformat()
        if iso not in self.makeup_dates and iso not in self.regular_dates:
            self.makeup_dates.append(iso)

    def remove_makeup_date(self, value: DateLike) -> None:
        iso = parse_session_date(value).isoformat()
        if iso in self.makeup_dates:
            self.makeup_dates.remove(iso)

    def _find_record(self, student_id: UUID, value: DateLike) -> Optional[AttendanceInfo]:
        day = parse_session_date(value)
        for record in self.dataset.attendance:
            if record.student_id == student_id and record.class_id == self.class_id and record.date == day:
                return record
        return None

    def get_status(self, student_id: UUID, value: DateLike) -> AttendanceStatus:
        record = self._find_record(student_id, value)
        return record.status if record else AttendanceStatus.UNSET

    def advance_status(self, student_id: UUID, value: DateLike) -> CellChange:
        """Move a cell to the next status and apply the change to the snapshot.

        The returned CellChange is what the store has to persist.
        """
        if all(s.id != student_id for s in self.students):
            raise MissingReference("Student is not enrolled in this class")
        day = parse_session_date(value)
        record = self._find_record(student_id, day)
        current = record.status if record else AttendanceStatus.UNSET
        new_status = current.successor()

        if new_status is AttendanceStatus.UNSET:
            # Only a stored record can cycle back to Unset
            self.dataset.attendance = [r for r in self.dataset.attendance if r.id != record.id]
            logger.debug("Cleared attendance %s for student %s on %s", record.id, student_id, day)
            return CellChange(action=CellAction.DELETE, record=record)

        if record is not None:
            record.status = new_status
            return CellChange(action=CellAction.UPDATE, record=record)

        record = AttendanceInfo(
            id=uuid.uuid4(),
            student_id=student_id,
            class_id=self.class_id,
            date=day,
            status=new_status,
            notes="",
        )
        self.dataset.attendance.append(record)
        return CellChange(action=CellAction.CREATE, record=record)

    def rows(self) -> List[Dict]:
        """One row per enrolled student with a status per column date."""
        dates = self.dates
        by_cell = {
            (r.student_id, r.date.isoformat()): r.status
            for r in self.dataset.attendance
            if r.class_id == self.class_id
        }
        return [
            {
                "student": student,
                "cells": [by_cell.get((student.id, d), AttendanceStatus.UNSET) for d in dates],
            }
            for student in self.students
        ]
