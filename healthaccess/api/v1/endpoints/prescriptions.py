import logging
from datetime import datetime
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.api.v1.endpoints.consultations import get_visible_consultation
from healthaccess.models.prescription import Prescription
from healthaccess.models.user import UserRole
from healthaccess.schemas.prescription import (
    PrescriptionCreate,
    PrescriptionStatus,
    PrescriptionStatusUpdate,
    PrescriptionWithParticipants,
)
from healthaccess.schemas.user import SessionContext
from healthaccess.services.events import (
    PRESCRIPTION_CREATED,
    PRESCRIPTION_STATUS_CHANGED,
    EventPublisher,
    get_event_publisher,
)
from healthaccess.utils.timezone import to_utc_aware
from healthaccess.workflow.composer import compose_prescription
from healthaccess.workflow.exceptions import ValidationError
from healthaccess.workflow.lifecycle import is_prescribable

logger = logging.getLogger(__name__)

router = APIRouter()

# Roles allowed to move an active prescription to each status
STATUS_ROLES = {
    PrescriptionStatus.DISPENSED: {UserRole.PHARMACIST},
    PrescriptionStatus.CANCELLED: {UserRole.DOCTOR},
    PrescriptionStatus.EXPIRED: {UserRole.ADMIN, UserRole.DOCTOR, UserRole.LHW, UserRole.PHARMACIST},
}


def get_visible_prescription(db: Session, prescription_id: str, session: SessionContext) -> Prescription:
    prescription = crud.prescription.get(db, id=prescription_id)
    if prescription is None:
        raise HTTPException(status_code=404, detail="Prescription not found")
    if session.role in (UserRole.ADMIN, UserRole.PHARMACIST):
        return prescription
    if session.user_id not in (prescription.patient_id, prescription.doctor_id):
        raise HTTPException(status_code=404, detail="Prescription not found")
    return prescription


@router.post("/", response_model=PrescriptionWithParticipants, status_code=201)
async def create_prescription(
    *,
    db: Session = Depends(deps.get_db),
    prescription_in: PrescriptionCreate,
    session: SessionContext = Depends(deps.get_current_doctor),
    now: datetime = Depends(deps.get_now),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    """
    Write a prescription against an ACTIVE or ENDED consultation.

    Incomplete medicine rows are dropped; at least one complete row is required.
    """
    draft = compose_prescription(
        prescription_in.consultation_id,
        prescription_in.medicines,
        follow_up_date=prescription_in.follow_up_date,
        instructions=prescription_in.instructions,
        today=to_utc_aware(now).date(),
    )

    consultation = get_visible_consultation(db, draft.consultation_id, session)
    if consultation.doctor_id != session.user_id:
        raise HTTPException(status_code=403, detail="Only the consulting doctor can prescribe")
    if not is_prescribable(consultation.consultation_status):
        raise ValidationError("Prescriptions can only be written for active or ended consultations")

    prescription = crud.prescription.create_from_draft(db, draft=draft, consultation=consultation)
    logger.info(
        f"Prescription {prescription.id} with {len(draft.medicines)} medicine(s) "
        f"for consultation {consultation.id}"
    )

    await publisher.publish(
        db,
        user_id=prescription.patient_id,
        event=PRESCRIPTION_CREATED,
        message=f"Dr. {session.full_name} has written you a prescription",
        payload={"prescription_id": prescription.id, "consultation_id": consultation.id},
    )
    return crud.prescription.get(db, id=prescription.id)


@router.get("/", response_model=List[PrescriptionWithParticipants])
def read_prescriptions(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
    skip: int = 0,
    limit: int = 100,
) -> Any:
    if session.role == UserRole.DOCTOR:
        return crud.prescription.get_for_doctor(db, doctor_id=session.user_id, skip=skip, limit=limit)
    if session.role == UserRole.PATIENT:
        return crud.prescription.get_for_patient(db, patient_id=session.user_id, skip=skip, limit=limit)
    if session.role in (UserRole.PHARMACIST, UserRole.ADMIN):
        return crud.prescription.get_all(db, skip=skip, limit=limit)
    raise HTTPException(status_code=403, detail="Not enough permissions")


@router.get("/consultation/{consultation_id}", response_model=List[PrescriptionWithParticipants])
def read_consultation_prescriptions(
    consultation_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    consultation = get_visible_consultation(db, consultation_id, session)
    return crud.prescription.get_for_consultation(db, consultation_id=consultation.id)


@router.get("/patient/{patient_id}", response_model=List[PrescriptionWithParticipants])
def read_patient_prescriptions(
    patient_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_staff),
    skip: int = 0,
    limit: int = 100,
) -> Any:
    return crud.prescription.get_for_patient(db, patient_id=patient_id, skip=skip, limit=limit)


@router.get("/{prescription_id}", response_model=PrescriptionWithParticipants)
def read_prescription(
    prescription_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    return get_visible_prescription(db, prescription_id, session)


@router.patch("/{prescription_id}/status", response_model=PrescriptionWithParticipants)
async def update_prescription_status(
    prescription_id: str,
    status_in: PrescriptionStatusUpdate,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_staff),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> Any:
    """
    Dispense (pharmacist), cancel (prescribing doctor) or expire an active prescription.
    """
    prescription = get_visible_prescription(db, prescription_id, session)
    target = status_in.status
    if prescription.status != PrescriptionStatus.ACTIVE.value or target not in STATUS_ROLES:
        raise ValidationError(f"Cannot move prescription from {prescription.status} to {target.value}")
    if session.role not in STATUS_ROLES[target]:
        raise HTTPException(status_code=403, detail=f"Not allowed to mark prescription {target.value}")
    if target == PrescriptionStatus.CANCELLED and prescription.doctor_id != session.user_id:
        raise HTTPException(status_code=403, detail="Only the prescribing doctor can cancel")

    prescription = crud.prescription.update(db, db_obj=prescription, obj_in={"status": target.value})
    logger.info(f"Prescription {prescription.id} marked {target.value} by {session.user_id}")

    await publisher.publish(
        db,
        user_id=prescription.patient_id,
        event=PRESCRIPTION_STATUS_CHANGED,
        message=f"Your prescription was {target.value}",
        payload={"prescription_id": prescription.id, "status": target.value},
    )
    return prescription
