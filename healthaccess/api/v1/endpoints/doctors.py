import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.models.user import UserRole
from healthaccess.schemas.user import DoctorAvailability, DoctorProfile, DoctorStatusUpdate, SessionContext

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[DoctorProfile])
def read_doctors(
    db: Session = Depends(deps.get_db),
    _: SessionContext = Depends(deps.get_current_session),
    status: Optional[DoctorAvailability] = None,
    skip: int = 0,
    limit: int = 100,
) -> Any:
    """
    Active doctors a patient can book with, optionally only those with the
    given availability.
    """
    return crud.user.get_doctors(db, availability=status, skip=skip, limit=limit)


@router.get("/profile", response_model=DoctorProfile)
def read_own_profile(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
) -> Any:
    return crud.user.get(db, id=session.user_id)


@router.put("/status", response_model=DoctorProfile)
def update_availability(
    status_in: DoctorStatusUpdate,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_doctor),
) -> Any:
    doctor = crud.user.get(db, id=session.user_id)
    doctor = crud.user.set_availability(db, db_obj=doctor, availability=status_in.status)
    logger.info(f"Doctor {doctor.id} is now {status_in.status.value}")
    return doctor


@router.get("/{doctor_id}", response_model=DoctorProfile)
def read_doctor(
    doctor_id: str,
    db: Session = Depends(deps.get_db),
    _: SessionContext = Depends(deps.get_current_session),
) -> Any:
    doctor = crud.user.get(db, id=doctor_id)
    if doctor is None or doctor.role != UserRole.DOCTOR.value:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return doctor
