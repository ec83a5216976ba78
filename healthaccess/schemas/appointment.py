from typing import Optional
from datetime import datetime, date as calendar_date
from pydantic import BaseModel, Field, field_validator

from healthaccess.schemas.user import Participant
from healthaccess.utils.timezone import to_utc_aware
from healthaccess.workflow.eligibility import WindowState
from healthaccess.workflow.status import AppointmentStatus


# Properties to receive on appointment booking
class AppointmentCreate(BaseModel):
    doctor_id: str
    start_time: datetime
    end_time: datetime
    date: Optional[calendar_date] = None
    reason_for_visit: Optional[str] = Field(default=None, alias="reason")

    class Config:
        populate_by_name = True


class AppointmentEligibility(BaseModel):
    eligible: bool
    can_join: bool
    state: WindowState
    label: Optional[str] = None
    opens_at: Optional[datetime] = None
    closes_at: Optional[datetime] = None
    seconds_until_open: Optional[int] = None


# Properties shared by models stored in DB
class Appointment(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    date: calendar_date
    time: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: str
    reason_for_visit: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc_aware(v)

    class Config:
        from_attributes = True


# Appointment with participants, canonical status and join window
class AppointmentWithDetails(Appointment):
    canonical_status: AppointmentStatus
    status_recognized: bool
    patient: Optional[Participant] = None
    doctor: Optional[Participant] = None
    eligibility: AppointmentEligibility
