from typing import List
from sqlalchemy.orm import Session, joinedload

from healthaccess.crud.base import CRUDBase
from healthaccess.models.consultation import Consultation
from healthaccess.models.prescription import Prescription
from healthaccess.schemas.prescription import PrescriptionCreate, PrescriptionStatusUpdate
from healthaccess.workflow.composer import PrescriptionDraft


class CRUDPrescription(CRUDBase[Prescription, PrescriptionCreate, PrescriptionStatusUpdate]):
    def create_from_draft(
        self, db: Session, *, draft: PrescriptionDraft, consultation: Consultation
    ) -> Prescription:
        db_obj = Prescription(
            consultation_id=consultation.id,
            patient_id=consultation.patient_id,
            doctor_id=consultation.doctor_id,
            medicines=[m.as_dict() for m in draft.medicines],
            follow_up_date=draft.follow_up_date,
            instructions=draft.instructions,
            status="active",
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def _listing(self, db: Session):
        return db.query(Prescription).options(
            joinedload(Prescription.patient), joinedload(Prescription.doctor)
        )

    def get_for_patient(
        self, db: Session, *, patient_id: str, skip: int = 0, limit: int = 100
    ) -> List[Prescription]:
        return (
            self._listing(db)
            .filter(Prescription.patient_id == patient_id)
            .order_by(Prescription.prescription_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_for_doctor(
        self, db: Session, *, doctor_id: str, skip: int = 0, limit: int = 100
    ) -> List[Prescription]:
        return (
            self._listing(db)
            .filter(Prescription.doctor_id == doctor_id)
            .order_by(Prescription.prescription_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_for_consultation(self, db: Session, *, consultation_id: str) -> List[Prescription]:
        return (
            self._listing(db)
            .filter(Prescription.consultation_id == consultation_id)
            .order_by(Prescription.prescription_date.desc())
            .all()
        )

    def get_all(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Prescription]:
        return (
            self._listing(db)
            .order_by(Prescription.prescription_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )


prescription = CRUDPrescription(Prescription)
