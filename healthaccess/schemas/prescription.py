from typing import List, Optional
from datetime import datetime, date
from enum import Enum
from pydantic import BaseModel, Field

from healthaccess.schemas.user import Participant


class PrescriptionStatus(str, Enum):
    ACTIVE = "active"
    DISPENSED = "dispensed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class MedicineRow(BaseModel):
    """One form row; blanks are allowed here and filtered by the composer."""
    medicine_name: str = ""
    dosage: str = ""
    frequency: str = ""
    duration: str = ""
    instructions: Optional[str] = None


class Medicine(BaseModel):
    medicine_name: str
    dosage: str
    frequency: str
    duration: str
    instructions: str = ""


class PrescriptionCreate(BaseModel):
    consultation_id: Optional[str] = Field(default=None, alias="consultationId")
    medicines: List[MedicineRow] = Field(default_factory=list)
    follow_up_date: Optional[date] = None
    instructions: Optional[str] = None

    class Config:
        populate_by_name = True


class PrescriptionStatusUpdate(BaseModel):
    status: PrescriptionStatus


class Prescription(BaseModel):
    id: str
    consultation_id: str
    patient_id: str
    doctor_id: str
    medicines: List[Medicine]
    follow_up_date: Optional[date] = None
    instructions: Optional[str] = None
    status: PrescriptionStatus
    prescription_date: datetime

    class Config:
        from_attributes = True


class PrescriptionWithParticipants(Prescription):
    patient: Optional[Participant] = None
    doctor: Optional[Participant] = None
