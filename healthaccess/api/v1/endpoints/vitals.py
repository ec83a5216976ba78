import logging
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.models.user import UserRole
from healthaccess.models.vitals import VitalRecord
from healthaccess.schemas.user import SessionContext
from healthaccess.schemas.vitals import (
    AlertLevel,
    VitalRecord as VitalRecordSchema,
    VitalRecordCreate,
    VitalRecordUpdate,
)
from healthaccess.services.vitals_alerts import alert_findings, compute_alert_level

logger = logging.getLogger(__name__)

router = APIRouter()

# Roles that may record or read vitals on behalf of a patient
CARE_ROLES = (UserRole.DOCTOR, UserRole.LHW, UserRole.ADMIN)


def _readings(record: Any) -> dict:
    return {
        "heart_rate": record.heart_rate,
        "systolic": record.systolic,
        "diastolic": record.diastolic,
        "temperature": record.temperature,
        "oxygen_saturation": record.oxygen_saturation,
    }


def _check_patient_access(db: Session, patient_id: str, session: SessionContext):
    if session.role == UserRole.PATIENT:
        if patient_id != session.user_id:
            raise HTTPException(status_code=403, detail="Patients can only access their own vitals")
        return
    if session.role not in CARE_ROLES:
        raise HTTPException(status_code=403, detail="Not enough permissions")
    patient = crud.user.get(db, id=patient_id)
    if patient is None or patient.role != UserRole.PATIENT.value:
        raise HTTPException(status_code=404, detail="Patient not found")


def get_visible_record(db: Session, record_id: str, session: SessionContext) -> VitalRecord:
    record = crud.vitals.get(db, id=record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Vital record not found")
    if session.role == UserRole.PATIENT and record.patient_id != session.user_id:
        raise HTTPException(status_code=404, detail="Vital record not found")
    if session.role not in CARE_ROLES and session.role != UserRole.PATIENT:
        raise HTTPException(status_code=403, detail="Not enough permissions")
    return record


@router.post("/", response_model=VitalRecordSchema, status_code=201)
def create_vital_record(
    *,
    db: Session = Depends(deps.get_db),
    vitals_in: VitalRecordCreate,
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    """
    Record vitals. Patients record for themselves; doctors and health workers
    must name the patient.
    """
    if session.role == UserRole.PATIENT:
        patient_id = vitals_in.patient_id or session.user_id
    else:
        if not vitals_in.patient_id:
            raise HTTPException(status_code=400, detail="patient_id is required")
        patient_id = vitals_in.patient_id
    _check_patient_access(db, patient_id, session)

    bp = vitals_in.blood_pressure
    readings = {
        "heart_rate": vitals_in.heart_rate,
        "systolic": bp.systolic if bp else None,
        "diastolic": bp.diastolic if bp else None,
        "temperature": vitals_in.temperature,
        "oxygen_saturation": vitals_in.oxygen_saturation,
    }
    level = compute_alert_level(**readings)
    record = crud.vitals.create_for_patient(
        db,
        obj_in=vitals_in,
        patient_id=patient_id,
        recorded_by_id=session.user_id,
        alert_level=level.value,
    )
    if level != AlertLevel.NORMAL:
        findings = ", ".join(text for _, text in alert_findings(**readings))
        logger.warning(f"Vitals {record.id} for patient {patient_id} flagged {level.value}: {findings}")
    return record


@router.get("/", response_model=List[VitalRecordSchema])
def read_my_vitals(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_patient),
    since: Optional[datetime] = None,
    skip: int = 0,
    limit: int = 100,
) -> Any:
    return crud.vitals.get_for_patient(db, patient_id=session.user_id, since=since, skip=skip, limit=limit)


@router.get("/patient/{patient_id}", response_model=List[VitalRecordSchema])
def read_patient_vitals(
    patient_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
    since: Optional[datetime] = None,
    skip: int = 0,
    limit: int = 100,
) -> Any:
    _check_patient_access(db, patient_id, session)
    return crud.vitals.get_for_patient(db, patient_id=patient_id, since=since, skip=skip, limit=limit)


@router.get("/patient/{patient_id}/latest", response_model=VitalRecordSchema)
def read_latest_vitals(
    patient_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    _check_patient_access(db, patient_id, session)
    record = crud.vitals.get_latest(db, patient_id=patient_id)
    if record is None:
        raise HTTPException(status_code=404, detail="No vitals recorded")
    return record


@router.get("/{record_id}", response_model=VitalRecordSchema)
def read_vital_record(
    record_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    return get_visible_record(db, record_id, session)


@router.put("/{record_id}", response_model=VitalRecordSchema)
def update_vital_record(
    record_id: str,
    vitals_in: VitalRecordUpdate,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    record = get_visible_record(db, record_id, session)
    if record.recorded_by_id != session.user_id and session.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Only the author can edit this record")

    update_data = vitals_in.model_dump(exclude_unset=True, exclude={"blood_pressure"})
    if "blood_pressure" in vitals_in.model_fields_set:
        bp = vitals_in.blood_pressure
        update_data["systolic"] = bp.systolic if bp else None
        update_data["diastolic"] = bp.diastolic if bp else None
    for field, value in update_data.items():
        setattr(record, field, value)
    record.alert_level = compute_alert_level(**_readings(record)).value
    return crud.vitals.update(db, db_obj=record, obj_in={})


@router.delete("/{record_id}", status_code=204)
def delete_vital_record(
    record_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
):
    record = get_visible_record(db, record_id, session)
    if record.recorded_by_id != session.user_id and session.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Only the author can delete this record")
    crud.vitals.remove(db, id=record.id)
