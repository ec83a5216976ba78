import uuid
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Boolean, JSON
from sqlalchemy.orm import relationship
from healthaccess.db.base import Base
from healthaccess.utils.timezone import utcnow_naive


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    event = Column(String(50), nullable=False)  # e.g. appointment_booked, consultation_reminder
    message = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow_naive, index=True)

    user = relationship("User", back_populates="notifications")
