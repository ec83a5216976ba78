from typing import Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field

from healthaccess.models.user import UserRole


class UserBase(BaseModel):
    email: str
    full_name: str
    role: UserRole = UserRole.PATIENT
    specialization: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0, le=150)
    gender: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)


class User(UserBase):
    id: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class Participant(BaseModel):
    """Expanded patient/doctor reference embedded in other records."""
    id: str
    full_name: str
    specialization: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None

    class Config:
        from_attributes = True


class DoctorAvailability(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class DoctorProfile(Participant):
    email: str
    availability_status: Optional[DoctorAvailability] = None


class DoctorStatusUpdate(BaseModel):
    status: DoctorAvailability


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole
    user_id: str


class TokenPayload(BaseModel):
    sub: str
    role: UserRole


class SessionContext(BaseModel):
    """Identity of the caller, passed explicitly into anything that needs it."""
    user_id: str
    role: UserRole
    full_name: str
