from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from healthaccess.crud.base import CRUDBase
from healthaccess.models.appointment import Appointment
from healthaccess.models.consultation import Consultation
from healthaccess.schemas.consultation import ConsultationCreate, ConsultationUpdate
from healthaccess.workflow.exceptions import DuplicateConsultationError


class CRUDConsultation(CRUDBase[Consultation, ConsultationCreate, ConsultationUpdate]):
    def get_by_appointment(self, db: Session, *, appointment_id: str) -> Optional[Consultation]:
        return db.query(Consultation).filter(Consultation.appointment_id == appointment_id).first()

    def create_for_appointment(
        self, db: Session, *, obj_in: ConsultationCreate, appointment: Appointment
    ) -> Consultation:
        """One consultation per appointment; a second attempt raises DuplicateConsultationError.

        The unique constraint on ``appointment_id`` settles concurrent creates.
        """
        existing = self.get_by_appointment(db, appointment_id=appointment.id)
        if existing:
            raise DuplicateConsultationError(appointment.id, existing.id)

        db_obj = Consultation(
            appointment_id=appointment.id,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            consultation_status="ACTIVE",
            symptoms=obj_in.symptoms,
            diagnosis=obj_in.diagnosis,
            doctor_notes=obj_in.doctor_notes,
            recommended_tests=obj_in.recommended_tests,
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            existing = self.get_by_appointment(db, appointment_id=appointment.id)
            raise DuplicateConsultationError(appointment.id, existing.id if existing else None)
        db.refresh(db_obj)
        return db_obj

    def get_for_doctor(
        self, db: Session, *, doctor_id: str, skip: int = 0, limit: int = 100
    ) -> List[Consultation]:
        return (
            db.query(Consultation)
            .options(joinedload(Consultation.patient), joinedload(Consultation.doctor))
            .filter(Consultation.doctor_id == doctor_id)
            .order_by(Consultation.consultation_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_for_patient(
        self, db: Session, *, patient_id: str, skip: int = 0, limit: int = 100
    ) -> List[Consultation]:
        return (
            db.query(Consultation)
            .options(joinedload(Consultation.patient), joinedload(Consultation.doctor))
            .filter(Consultation.patient_id == patient_id)
            .order_by(Consultation.consultation_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def set_status(self, db: Session, *, db_obj: Consultation, status: str) -> Consultation:
        db_obj.consultation_status = status
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


consultation = CRUDConsultation(Consultation)
