from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from healthaccess.schemas.user import Participant
from healthaccess.workflow.lifecycle import ConsultationStatus


class ConsultationCreate(BaseModel):
    appointment_id: str = Field(..., alias="appointmentId")
    symptoms: List[str] = Field(default_factory=list)
    diagnosis: Optional[str] = None
    doctor_notes: Optional[str] = None
    recommended_tests: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class ConsultationUpdate(BaseModel):
    symptoms: Optional[List[str]] = None
    diagnosis: Optional[str] = None
    doctor_notes: Optional[str] = None
    recommended_tests: Optional[List[str]] = None


class ConsultationStatusUpdate(BaseModel):
    consultation_status: ConsultationStatus


class Consultation(BaseModel):
    id: str
    appointment_id: str
    patient_id: str
    doctor_id: str
    consultation_status: str
    symptoms: List[str] = []
    diagnosis: Optional[str] = None
    doctor_notes: Optional[str] = None
    recommended_tests: List[str] = []
    consultation_date: datetime
    created_at: datetime

    class Config:
        from_attributes = True


class ConsultationWithParticipants(Consultation):
    patient: Optional[Participant] = None
    doctor: Optional[Participant] = None


class PrescribableConsultations(BaseModel):
    items: List[ConsultationWithParticipants]
    total: int
    fallback_applied: bool


class ConsultationDiagnostic(BaseModel):
    consultation: Consultation
    canonical_status: ConsultationStatus
    prescribable: bool
