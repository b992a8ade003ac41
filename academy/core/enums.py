from enum import Enum


class RecordStatus(str, Enum):
    ACTIVE = "Active"
    ARCHIVED = "Archived"


class AttendanceStatus(str, Enum):
    """Per-cell attendance status. UNSET is never stored; it means "no record"."""

    UNSET = ""
    PRESENT = "P"
    ABSENT = "A"
    LATE = "L"
    EXCUSED = "E"

    def successor(self) -> "AttendanceStatus":
        """Next status in the grid click cycle: Unset, Present, Absent, Late, Excused, Unset."""
        return _STATUS_CYCLE[(_STATUS_CYCLE.index(self) + 1) % len(_STATUS_CYCLE)]


_STATUS_CYCLE = (
    AttendanceStatus.UNSET,
    AttendanceStatus.PRESENT,
    AttendanceStatus.ABSENT,
    AttendanceStatus.LATE,
    AttendanceStatus.EXCUSED,
)


class TimeSlotMode(str, Enum):
    COMPUTED = "computed"
    CUSTOM = "custom"


class CellAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
