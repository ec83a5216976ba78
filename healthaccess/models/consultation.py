import uuid
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from healthaccess.db.base import Base
from healthaccess.utils.timezone import utcnow_naive


class Consultation(Base):
    __tablename__ = "consultations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # One consultation per appointment
    appointment_id = Column(String(36), ForeignKey("appointments.id"), nullable=False, unique=True)
    patient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    consultation_status = Column(String(20), nullable=False, default="ACTIVE")  # ACTIVE, ENDED, COMPLETED
    symptoms = Column(JSON, nullable=False, default=list)
    diagnosis = Column(Text, nullable=True)
    doctor_notes = Column(Text, nullable=True)
    recommended_tests = Column(JSON, nullable=False, default=list)
    consultation_date = Column(DateTime, nullable=False, default=utcnow_naive)

    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    # Relationships
    appointment = relationship("Appointment", back_populates="consultation")
    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])
    prescriptions = relationship("Prescription", back_populates="consultation")
