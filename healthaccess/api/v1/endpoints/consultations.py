import logging
from datetime import datetime
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.api.v1.endpoints.appointments import get_visible_appointment
from healthaccess.core.config import settings
from healthaccess.models.consultation import Consultation
from healthaccess.models.user import UserRole
from healthaccess.schemas.consultation import (
    Consultation as ConsultationSchema,
    ConsultationCreate,
    ConsultationDiagnostic,
    ConsultationStatusUpdate,
    ConsultationUpdate,
    ConsultationWithParticipants,
    PrescribableConsultations,
)
from healthaccess.schemas.user import SessionContext
from healthaccess.services.events import (
    CONSULTATION_STARTED,
    CONSULTATION_STATUS_CHANGED,
    EventPublisher,
    get_event_publisher,
)
from healthaccess.workflow import lifecycle
from healthaccess.workflow.eligibility import WindowState, join_decision
from healthaccess.workflow.exceptions import DuplicateConsultationError, ValidationError
from healthaccess.workflow.lifecycle import ConsultationStatus
from healthaccess.workflow.status import AppointmentStatus

logger = logging.getLogger(__name__)

router = APIRouter()


def get_visible_consultation(db: Session, consultation_id: str, session: SessionContext) -> Consultation:
    consultation = crud.consultation.get(db, id=consultation_id)
    if consultation is None:
        raise HTTPException(status_code=404, detail="Consultation not found")
    if session.role == UserRole.ADMIN:
        return consultation
    if session.user_id not in (consultation.patient_id, consultation.doctor_id):
        raise HTTPException(status_code=404, detail="Consultation not found")
    return consultation


def _own_consultation(db: Session, consultation_id: str, session: SessionContext) -> Consultation:
    consultation = get_visible_consultation(db, consultation_id, session)
    if consultation.doctor_id != session.user_id:
        raise HTTPException(status_code=403, detail="Only the assigned doctor can do this")
    return consultation


@router.post("/", response_model=ConsultationWithParticipants, status_code=201)
async def start_consultation(
    *,
    db: Session = Depends(deps.get_db),
    consultation_in: ConsultationCreate,
    session: SessionContext = Depends(deps.get_current_doctor),
    now: datetime = Depends(deps.get_now),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    """
    Start the consultation for an approved appointment.

    A second attempt for the same appointment answers 409 with the id of the
    consultation that already exists.
    """
    appointment = get_visible_appointment(db, consultation_in.appointment_id, session)
    if appointment.doctor_id != session.user_id:
        raise HTTPException(status_code=403, detail="Only the assigned doctor can start this consultation")

    existing = crud.consultation.get_by_appointment(db, appointment_id=appointment.id)
    if existing is not None:
        raise DuplicateConsultationError(appointment.id, existing.id)

    decision = join_decision(appointment, now)
    if decision.status is not AppointmentStatus.APPROVED:
        raise ValidationError("Consultation can only be started for an approved appointment")
    if settings.ENFORCE_CONSULTATION_WINDOW and not decision.window.eligible:
        window = decision.window
        if window.state == WindowState.ENDED:
            raise ValidationError("The consultation window has ended")
        if window.state == WindowState.UNSCHEDULED:
            raise ValidationError("Appointment has no scheduled start and end time")
        raise ValidationError(f"Consultation is not available yet ({window.label})")

    consultation = crud.consultation.create_for_appointment(
        db, obj_in=consultation_in, appointment=appointment
    )
    logger.info(f"Consultation {consultation.id} started for appointment {appointment.id}")

    await publisher.publish(
        db,
        user_id=consultation.patient_id,
        event=CONSULTATION_STARTED,
        message=f"Dr. {session.full_name} has started your consultation",
        payload={"consultation_id": consultation.id, "appointment_id": appointment.id},
    )
    return consultation


@router.get("/", response_model=List[ConsultationWithParticipants])
def read_consultations(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
    skip: int = 0,
    limit: int = 100,
) -> Any:
    if session.role == UserRole.DOCTOR:
        return crud.consultation.get_for_doctor(db, doctor_id=session.user_id, skip=skip, limit=limit)
    if session.role == UserRole.PATIENT:
        return crud.consultation.get_for_patient(db, patient_id=session.user_id, skip=skip, limit=limit)
    if session.role == UserRole.ADMIN:
        return crud.consultation.get_multi(db, skip=skip, limit=limit)
    raise HTTPException(status_code=403, detail="Not enough permissions")


@router.get("/prescribable", response_model=PrescribableConsultations)
def read_prescribable_consultations(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
) -> Any:
    """
    Consultations a prescription can be written against (ACTIVE or ENDED).

    An empty ``items`` list is a normal answer. The unfiltered fallback only
    applies when enabled in settings and is flagged in the response.
    """
    consultations = crud.consultation.get_for_doctor(db, doctor_id=session.user_id, limit=500)
    selection = lifecycle.select_prescribable(
        consultations, allow_fallback=settings.ALLOW_UNFILTERED_CONSULTATION_FALLBACK
    )
    return PrescribableConsultations(
        items=[ConsultationWithParticipants.model_validate(c) for c in selection.items],
        total=selection.total,
        fallback_applied=selection.fallback_applied,
    )


@router.get("/diagnostics", response_model=List[ConsultationDiagnostic])
def read_consultation_diagnostics(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
) -> Any:
    """
    Every consultation of the doctor with its canonical status and whether it is prescribable.
    """
    consultations = crud.consultation.get_for_doctor(db, doctor_id=session.user_id, limit=500)
    return [
        ConsultationDiagnostic(
            consultation=ConsultationSchema.model_validate(c.item),
            canonical_status=c.status,
            prescribable=c.prescribable,
        )
        for c in lifecycle.classify_consultations(consultations)
    ]


@router.get("/by-appointment/{appointment_id}", response_model=ConsultationWithParticipants)
def read_consultation_by_appointment(
    appointment_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    appointment = get_visible_appointment(db, appointment_id, session)
    consultation = crud.consultation.get_by_appointment(db, appointment_id=appointment.id)
    if consultation is None:
        raise HTTPException(status_code=404, detail="Consultation not found")
    return consultation


@router.get("/{consultation_id}", response_model=ConsultationWithParticipants)
def read_consultation(
    consultation_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    return get_visible_consultation(db, consultation_id, session)


@router.put("/{consultation_id}", response_model=ConsultationWithParticipants)
def update_consultation(
    consultation_id: str,
    consultation_in: ConsultationUpdate,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
) -> Any:
    """
    Update symptoms, diagnosis, notes or recommended tests.
    """
    consultation = _own_consultation(db, consultation_id, session)
    if lifecycle.normalize_consultation_status(consultation.consultation_status) == ConsultationStatus.COMPLETED:
        raise ValidationError("Completed consultations cannot be edited")
    return crud.consultation.update(db, db_obj=consultation, obj_in=consultation_in)


@router.patch("/{consultation_id}/status", response_model=ConsultationWithParticipants)
async def update_consultation_status(
    consultation_id: str,
    status_in: ConsultationStatusUpdate,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    consultation = _own_consultation(db, consultation_id, session)
    previous = consultation.consultation_status
    stored = lifecycle.check_transition(previous, status_in.consultation_status)
    consultation = crud.consultation.set_status(db, db_obj=consultation, status=stored)
    logger.info(f"Consultation {consultation.id}: {previous} -> {stored}")

    await publisher.publish(
        db,
        user_id=consultation.patient_id,
        event=CONSULTATION_STATUS_CHANGED,
        message=f"Consultation {stored.lower()}",
        payload={"consultation_id": consultation.id, "status": stored},
    )
    return consultation
