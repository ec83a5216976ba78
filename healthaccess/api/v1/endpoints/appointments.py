import logging
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.models.appointment import Appointment
from healthaccess.models.user import UserRole
from healthaccess.schemas.appointment import (
    AppointmentCreate,
    AppointmentEligibility,
    AppointmentWithDetails,
)
from healthaccess.schemas.user import SessionContext
from healthaccess.services.events import (
    APPOINTMENT_BOOKED,
    APPOINTMENT_STATUS_CHANGED,
    EventPublisher,
    get_event_publisher,
)
from healthaccess.utils.timezone import to_utc_aware
from healthaccess.workflow import status as appointment_status
from healthaccess.workflow.eligibility import join_decision
from healthaccess.workflow.exceptions import ValidationError
from healthaccess.workflow.status import AppointmentStatus, normalize_appointment_status, read_status

logger = logging.getLogger(__name__)

router = APIRouter()


class AppointmentView(str, Enum):
    ALL = "all"
    UPCOMING = "upcoming"
    TODAY = "today"


def eligibility_for(appointment: Appointment, now: datetime) -> AppointmentEligibility:
    decision = join_decision(appointment, now)
    window = decision.window
    return AppointmentEligibility(
        eligible=window.eligible,
        can_join=decision.allowed,
        state=window.state,
        label=window.label,
        opens_at=window.opens_at,
        closes_at=window.closes_at,
        seconds_until_open=window.seconds_until_open,
    )


def with_details(appointment: Appointment, now: datetime) -> AppointmentWithDetails:
    reading = read_status(appointment.status)
    if reading.warning is not None:
        logger.warning(f"Appointment {appointment.id}: {reading.warning}")
    return AppointmentWithDetails.model_validate(
        {
            "id": appointment.id,
            "patient_id": appointment.patient_id,
            "doctor_id": appointment.doctor_id,
            "date": appointment.date,
            "time": appointment.time,
            "start_time": appointment.start_time,
            "end_time": appointment.end_time,
            "status": appointment.status,
            "reason_for_visit": appointment.reason_for_visit,
            "created_at": appointment.created_at,
            "updated_at": appointment.updated_at,
            "canonical_status": reading.status,
            "status_recognized": reading.recognized,
            "patient": appointment.patient,
            "doctor": appointment.doctor,
            "eligibility": eligibility_for(appointment, now),
        },
        from_attributes=True,
    )


def get_visible_appointment(db: Session, appointment_id: str, session: SessionContext) -> Appointment:
    appointment = crud.appointment.get_with_details(db, appointment_id=appointment_id)
    if appointment is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    if session.role == UserRole.ADMIN:
        return appointment
    if session.user_id not in (appointment.patient_id, appointment.doctor_id):
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.post("/", response_model=AppointmentWithDetails, status_code=201)
async def book_appointment(
    *,
    db: Session = Depends(deps.get_db),
    appointment_in: AppointmentCreate,
    session: SessionContext = Depends(deps.get_current_patient),
    now: datetime = Depends(deps.get_now),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    """
    Book an appointment with a doctor. New bookings start as pending.
    """
    doctor = crud.user.get(db, id=appointment_in.doctor_id)
    if doctor is None or doctor.role != UserRole.DOCTOR.value:
        raise HTTPException(status_code=404, detail="Doctor not found")

    start = to_utc_aware(appointment_in.start_time)
    end = to_utc_aware(appointment_in.end_time)
    if end <= start:
        raise ValidationError("End time must be after start time")
    if start < to_utc_aware(now):
        raise ValidationError("Cannot book an appointment in the past")
    if appointment_in.date is not None and appointment_in.date != start.date():
        raise ValidationError("Appointment date does not match start time")

    appointment = crud.appointment.create_with_patient(
        db, obj_in=appointment_in, patient_id=session.user_id
    )
    logger.info(f"Appointment {appointment.id} booked by patient {session.user_id}")

    await publisher.publish(
        db,
        user_id=appointment.doctor_id,
        event=APPOINTMENT_BOOKED,
        message=f"New appointment request from {session.full_name}",
        payload={"appointment_id": appointment.id, "start_time": start},
    )
    appointment = crud.appointment.get_with_details(db, appointment_id=appointment.id)
    return with_details(appointment, now)


@router.get("/", response_model=List[AppointmentWithDetails])
def read_appointments(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
    now: datetime = Depends(deps.get_now),
    status: Optional[str] = None,
    view: AppointmentView = AppointmentView.ALL,
    skip: int = 0,
    limit: int = Query(100, le=500),
) -> Any:
    """
    Retrieve appointments for the current user, optionally filtered by
    status and view. Any status spelling is accepted (``approved``,
    ``ACCEPTED``, ``scheduled``...) and matched on its canonical value.
    """
    filters = {}
    if session.role == UserRole.DOCTOR:
        filters["doctor_id"] = session.user_id
    elif session.role == UserRole.PATIENT:
        filters["patient_id"] = session.user_id
    elif session.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Not enough permissions")

    if status is not None:
        filters["status"] = normalize_appointment_status(status)
    current = to_utc_aware(now)
    if view == AppointmentView.TODAY:
        filters["on_date"] = current.date()
    elif view == AppointmentView.UPCOMING:
        filters["not_ended_at"] = current

    appointments = crud.appointment.get_listing(db, skip=skip, limit=limit, **filters)
    return [with_details(a, now) for a in appointments]


@router.get("/{appointment_id}", response_model=AppointmentWithDetails)
def read_appointment(
    appointment_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
    now: datetime = Depends(deps.get_now),
) -> Any:
    appointment = get_visible_appointment(db, appointment_id, session)
    return with_details(appointment, now)


@router.get("/{appointment_id}/eligibility", response_model=AppointmentEligibility)
def read_eligibility(
    appointment_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
    now: datetime = Depends(deps.get_now),
) -> Any:
    """
    Whether the consultation for this appointment can be started or joined now.
    """
    appointment = get_visible_appointment(db, appointment_id, session)
    return eligibility_for(appointment, now)


async def _transition(
    db: Session,
    appointment: Appointment,
    target: AppointmentStatus,
    session: SessionContext,
    now: datetime,
    publisher: EventPublisher,
) -> AppointmentWithDetails:
    previous = appointment.status
    stored = appointment_status.check_transition(previous, target)
    appointment = crud.appointment.set_status(db, db_obj=appointment, status=stored)
    logger.info(f"Appointment {appointment.id}: {previous} -> {stored} by {session.user_id}")

    recipient = appointment.patient_id if session.user_id == appointment.doctor_id else appointment.doctor_id
    await publisher.publish(
        db,
        user_id=recipient,
        event=APPOINTMENT_STATUS_CHANGED,
        message=f"Appointment {target.value.lower()}",
        payload={"appointment_id": appointment.id, "status": target.value},
    )
    return with_details(appointment, now)


def _doctor_appointment(db: Session, appointment_id: str, session: SessionContext) -> Appointment:
    appointment = get_visible_appointment(db, appointment_id, session)
    if appointment.doctor_id != session.user_id:
        raise HTTPException(status_code=403, detail="Only the assigned doctor can do this")
    return appointment


@router.post("/{appointment_id}/approve", response_model=AppointmentWithDetails)
async def approve_appointment(
    appointment_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
    now: datetime = Depends(deps.get_now),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    appointment = _doctor_appointment(db, appointment_id, session)
    return await _transition(db, appointment, AppointmentStatus.APPROVED, session, now, publisher)


@router.post("/{appointment_id}/reject", response_model=AppointmentWithDetails)
async def reject_appointment(
    appointment_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
    now: datetime = Depends(deps.get_now),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    appointment = _doctor_appointment(db, appointment_id, session)
    return await _transition(db, appointment, AppointmentStatus.REJECTED, session, now, publisher)


@router.post("/{appointment_id}/complete", response_model=AppointmentWithDetails)
async def complete_appointment(
    appointment_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
    now: datetime = Depends(deps.get_now),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    appointment = _doctor_appointment(db, appointment_id, session)
    return await _transition(db, appointment, AppointmentStatus.COMPLETED, session, now, publisher)


@router.post("/{appointment_id}/cancel", response_model=AppointmentWithDetails)
async def cancel_appointment(
    appointment_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_patient),
    now: datetime = Depends(deps.get_now),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    """
    Patient cancels their own booking; stored as rejected.
    """
    appointment = get_visible_appointment(db, appointment_id, session)
    if appointment.patient_id != session.user_id:
        raise HTTPException(status_code=403, detail="Only the patient can cancel this appointment")
    return await _transition(db, appointment, AppointmentStatus.REJECTED, session, now, publisher)
