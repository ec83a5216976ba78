import uuid
from sqlalchemy import Column, String, DateTime, Date, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from healthaccess.db.base import Base
from healthaccess.utils.timezone import utcnow_naive


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    consultation_id = Column(String(36), ForeignKey("consultations.id"), nullable=False, index=True)
    patient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # [{medicine_name, dosage, frequency, duration, instructions}, ...]
    medicines = Column(JSON, nullable=False)
    follow_up_date = Column(Date, nullable=True)
    instructions = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active, dispensed, expired, cancelled
    prescription_date = Column(DateTime, nullable=False, default=utcnow_naive)

    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    # Relationships
    consultation = relationship("Consultation", back_populates="prescriptions")
    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])
