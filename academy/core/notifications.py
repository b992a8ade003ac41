"""Makeup session email composition."""

from datetime import date, timedelta
from typing import Iterable, List

from academy.core.schemas import AbsenceEntry, AcademyContact, TimeSlot

SATURDAY = 5
DEFAULT_SLOT_COUNT = 3
DEFAULT_TIME_TEXT = "10:00 AM - 12:00 PM"
NO_SLOTS_LINE = "Please contact us to schedule a makeup session."


def suggest_time_slots(
    today: date,
    weekday: int = SATURDAY,
    count: int = DEFAULT_SLOT_COUNT,
    time_text: str = DEFAULT_TIME_TEXT,
) -> List[TimeSlot]:
    """Next ``count`` occurrences of ``weekday`` (Monday=0), today included."""
    first = today + timedelta(days=(weekday - today.weekday()) % 7)
    return [TimeSlot(slot_date=first + timedelta(weeks=i), time=time_text) for i in range(count)]


def format_slot_date(day: date) -> str:
    """e.g. Saturday, January 17, 2026"""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def format_time_slot(slot: TimeSlot) -> str:
    return f"• {format_slot_date(slot.slot_date)} - {slot.time}"


def usable_time_slots(slots: Iterable[TimeSlot]) -> List[TimeSlot]:
    """Drop slots missing a date or a time."""
    return [s for s in slots if s.slot_date and s.time.strip()]


def format_absence_line(entry: AbsenceEntry) -> str:
    plural = "s" if entry.total_absences > 1 else ""
    return (
        f"• {entry.student.full_name} - {entry.class_info.name} "
        f"({entry.total_absences} missed session{plural})"
    )


def compose_makeup_email(
    entries: Iterable[AbsenceEntry],
    slots: Iterable[TimeSlot],
    contact: AcademyContact,
) -> str:
    """Plain-text makeup invitation for the selected absence entries."""
    student_lines = "\n".join(format_absence_line(e) for e in entries)
    slot_lines = "\n".join(format_time_slot(s) for s in usable_time_slots(slots)) or NO_SLOTS_LINE

    return f"""Subject: {makeup_subject(contact)}

Dear Parents and Students,

We hope this message finds you well. We've noticed that some students have missed classes recently and we'd like to offer makeup sessions to ensure everyone stays on track with their learning goals.

Students Eligible for Makeup Classes:
{student_lines}

Proposed Makeup Sessions:
{slot_lines}

These sessions will cover the material missed and provide additional hands-on practice. Please RSVP by replying to this email or calling us at {contact.phone}.

Location: {contact.name}
{contact.address}

We're committed to your child's success and want to ensure they don't fall behind. These makeup sessions are complimentary and designed to help students catch up and build confidence.

Please let us know which session(s) work best for your schedule.

Best regards,
{contact.name} Team
{contact.email}
{contact.phone}"""


def makeup_subject(contact: AcademyContact) -> str:
    return f"Makeup Class Opportunity - {contact.name}"
