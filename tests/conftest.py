# tests/conftest.py
import os

# Configure the app for an in-memory database before anything imports settings
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "development"
os.environ["REDIS_URL"] = ""
os.environ["REMINDERS_ENABLED"] = "false"
os.environ["LOG_FILE"] = ""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.core import security
from healthaccess.db.base import Base
from healthaccess.db.session import SessionLocal, engine
from healthaccess.main import app
from healthaccess.models.appointment import Appointment
from healthaccess.models.consultation import Consultation
from healthaccess.models.user import UserRole
from healthaccess.schemas.user import UserCreate
import healthaccess.models  # noqa: F401  register models with Base

# Monday 2 June 2025, 09:56 UTC
FIXED_NOW = datetime(2025, 6, 2, 9, 56, tzinfo=timezone.utc)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def clock():
    return Clock(FIXED_NOW)


@pytest.fixture
def client(clock):
    app.dependency_overrides[deps.get_now] = clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, role: UserRole, email: str, full_name: str, **extra):
    return crud.user.create(
        db,
        obj_in=UserCreate(email=email, full_name=full_name, role=role, password="password123", **extra),
    )


def auth_headers(user) -> dict:
    token = security.create_access_token(user.id, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def doctor(db_session):
    return make_user(db_session, UserRole.DOCTOR, "dr.khan@example.com", "Ayesha Khan", specialization="General Medicine")


@pytest.fixture
def other_doctor(db_session):
    return make_user(db_session, UserRole.DOCTOR, "dr.malik@example.com", "Omar Malik", specialization="Cardiology")


@pytest.fixture
def patient(db_session):
    return make_user(db_session, UserRole.PATIENT, "sara@example.com", "Sara Ahmed", age=34, gender="female")


@pytest.fixture
def other_patient(db_session):
    return make_user(db_session, UserRole.PATIENT, "bilal@example.com", "Bilal Raza", age=51, gender="male")


@pytest.fixture
def pharmacist(db_session):
    return make_user(db_session, UserRole.PHARMACIST, "pharma@example.com", "Hina Shah")


@pytest.fixture
def lhw(db_session):
    return make_user(db_session, UserRole.LHW, "lhw@example.com", "Nadia Iqbal")


@pytest.fixture
def doctor_headers(doctor):
    return auth_headers(doctor)


@pytest.fixture
def patient_headers(patient):
    return auth_headers(patient)


def make_appointment(db, patient, doctor, start: datetime, status: str = "approved", minutes: int = 30):
    start_naive = start.astimezone(timezone.utc).replace(tzinfo=None)
    appointment = Appointment(
        patient_id=patient.id,
        doctor_id=doctor.id,
        date=start_naive.date(),
        start_time=start_naive,
        end_time=start_naive + timedelta(minutes=minutes),
        time=start_naive.strftime("%H:%M"),
        status=status,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def make_consultation(db, appointment, status: str = "ACTIVE"):
    consultation = Consultation(
        appointment_id=appointment.id,
        patient_id=appointment.patient_id,
        doctor_id=appointment.doctor_id,
        consultation_status=status,
        symptoms=[],
        recommended_tests=[],
    )
    db.add(consultation)
    db.commit()
    db.refresh(consultation)
    return consultation
