import uuid
from sqlalchemy import Column, String, DateTime, Float, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from healthaccess.db.base import Base
from healthaccess.utils.timezone import utcnow_naive


class VitalRecord(Base):
    __tablename__ = "vital_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    recorded_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    heart_rate = Column(Integer, nullable=True)          # bpm
    systolic = Column(Integer, nullable=True)            # mmHg
    diastolic = Column(Integer, nullable=True)           # mmHg
    temperature = Column(Float, nullable=True)           # Celsius
    oxygen_saturation = Column(Float, nullable=True)     # %
    weight = Column(Float, nullable=True)                # kg
    height = Column(Float, nullable=True)                # cm
    notes = Column(Text, nullable=True)

    alert_level = Column(String(10), nullable=False, default="normal")  # normal, warning, critical
    recorded_at = Column(DateTime, nullable=False, default=utcnow_naive, index=True)

    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    patient = relationship("User", foreign_keys=[patient_id])
