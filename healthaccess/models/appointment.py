import uuid
from sqlalchemy import Column, String, DateTime, Date, Text, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from healthaccess.db.base import Base
from healthaccess.utils.timezone import utcnow_naive


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    date = Column(Date, nullable=False)
    start_time = Column(DateTime, nullable=True)  # UTC-naive; absent on legacy rows
    end_time = Column(DateTime, nullable=True)
    time = Column(String(20), nullable=True)  # legacy free-form slot, e.g. "10:30"

    # pending, scheduled, approved, accepted, rejected, cancelled, completed
    status = Column(String(20), nullable=False, default="pending")
    reason_for_visit = Column(Text, nullable=True)

    reminder_sent = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    # Relationships
    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])
    consultation = relationship("Consultation", back_populates="appointment", uselist=False)
