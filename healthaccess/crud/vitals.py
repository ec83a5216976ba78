from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from healthaccess.crud.base import CRUDBase
from healthaccess.models.vitals import VitalRecord
from healthaccess.schemas.vitals import VitalRecordCreate, VitalRecordUpdate
from healthaccess.utils.timezone import to_utc_naive


class CRUDVitals(CRUDBase[VitalRecord, VitalRecordCreate, VitalRecordUpdate]):
    def create_for_patient(
        self,
        db: Session,
        *,
        obj_in: VitalRecordCreate,
        patient_id: str,
        recorded_by_id: str,
        alert_level: str,
    ) -> VitalRecord:
        data = obj_in.model_dump(exclude={"patient_id", "blood_pressure", "recorded_at"})
        if obj_in.blood_pressure is not None:
            data["systolic"] = obj_in.blood_pressure.systolic
            data["diastolic"] = obj_in.blood_pressure.diastolic
        if obj_in.recorded_at is not None:
            data["recorded_at"] = to_utc_naive(obj_in.recorded_at)
        db_obj = VitalRecord(
            patient_id=patient_id,
            recorded_by_id=recorded_by_id,
            alert_level=alert_level,
            **data,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_for_patient(
        self,
        db: Session,
        *,
        patient_id: str,
        since: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[VitalRecord]:
        query = db.query(VitalRecord).filter(VitalRecord.patient_id == patient_id)
        if since is not None:
            query = query.filter(VitalRecord.recorded_at >= to_utc_naive(since))
        return query.order_by(VitalRecord.recorded_at.desc()).offset(skip).limit(limit).all()

    def get_latest(self, db: Session, *, patient_id: str) -> Optional[VitalRecord]:
        return (
            db.query(VitalRecord)
            .filter(VitalRecord.patient_id == patient_id)
            .order_by(VitalRecord.recorded_at.desc())
            .first()
        )


vitals = CRUDVitals(VitalRecord)
