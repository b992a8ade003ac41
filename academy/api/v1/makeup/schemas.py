from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from academy.core.enums import TimeSlotMode
from academy.core.schemas import TimeSlot


class MakeupSelection(BaseModel):
    student_id: UUID
    class_id: UUID


class MakeupEmailRequest(BaseModel):
    """Compose an email for the selected absence entries."""

    selections: List[MakeupSelection] = Field(..., min_length=1)
    mode: TimeSlotMode = TimeSlotMode.COMPUTED
    custom_times: List[TimeSlot] = Field(default_factory=list, description="Used when mode is custom")
    reference_date: Optional[date] = Field(None, description="Day computed slots count from; defaults to today")


class MakeupEmailResponse(BaseModel):
    subject: str
    body: str
    recipients: List[str]
    time_slots: List[TimeSlot]


class TimeSlotsResponse(BaseModel):
    time_slots: List[TimeSlot]
    formatted: List[str]
