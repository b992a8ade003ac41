from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.absences import aggregate_absences
from academy.core.config import settings
from academy.core.enums import TimeSlotMode
from academy.core.exceptions import MissingReference
from academy.core.notifications import (
    compose_makeup_email,
    format_time_slot,
    makeup_subject,
    suggest_time_slots,
    usable_time_slots,
)
from academy.core.schemas import AbsenceEntry, AcademyContact, TimeSlot
from academy.core.store import load_dataset

from .schemas import MakeupEmailRequest, MakeupEmailResponse, TimeSlotsResponse


def academy_contact() -> AcademyContact:
    return AcademyContact(
        name=settings.academy_name,
        phone=settings.academy_phone,
        email=settings.academy_email,
        address=settings.academy_address,
    )


def computed_time_slots(reference_date: Optional[date] = None) -> List[TimeSlot]:
    return suggest_time_slots(
        reference_date or date.today(),
        weekday=settings.makeup_weekday,
        time_text=settings.makeup_time_text,
    )


def get_time_slots(reference_date: Optional[date] = None) -> TimeSlotsResponse:
    slots = computed_time_slots(reference_date)
    return TimeSlotsResponse(time_slots=slots, formatted=[format_time_slot(s) for s in slots])


async def list_makeup_suggestions(db: AsyncSession) -> List[AbsenceEntry]:
    dataset = await load_dataset(db)
    return aggregate_absences(dataset)


async def compose_email(db: AsyncSession, payload: MakeupEmailRequest) -> MakeupEmailResponse:
    """Render the makeup email for the selected (student, class) pairs, in selection order."""
    entries = await list_makeup_suggestions(db)
    by_pair = {(e.student.id, e.class_info.id): e for e in entries}
    selected: List[AbsenceEntry] = []
    for sel in payload.selections:
        entry = by_pair.get((sel.student_id, sel.class_id))
        if entry is None:
            raise MissingReference(f"No absences recorded for student {sel.student_id} in class {sel.class_id}")
        if entry not in selected:
            selected.append(entry)

    if payload.mode is TimeSlotMode.CUSTOM:
        slots = usable_time_slots(payload.custom_times)
    else:
        slots = computed_time_slots(payload.reference_date)

    contact = academy_contact()
    return MakeupEmailResponse(
        subject=makeup_subject(contact),
        body=compose_makeup_email(selected, slots, contact),
        recipients=[e.student.email for e in selected if e.student.email],
        time_slots=slots,
    )
