import uuid
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from healthaccess.db.base import Base
from healthaccess.utils.timezone import utcnow_naive


class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"
    LHW = "lhw"  # local healthcare worker
    PHARMACIST = "pharmacist"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    role = Column(String(20), nullable=False, index=True)

    # Doctor profile
    specialization = Column(String, nullable=True)
    availability_status = Column(String(20), nullable=True)  # available, busy, offline

    # Patient profile
    age = Column(Integer, nullable=True)
    gender = Column(String(20), nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    # Relationships
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
