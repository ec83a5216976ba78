from datetime import date, datetime
from typing import List, Optional
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, joinedload

from healthaccess.crud.base import CRUDBase
from healthaccess.models.appointment import Appointment
from healthaccess.schemas.appointment import AppointmentCreate
from healthaccess.utils.timezone import to_utc_naive
from healthaccess.workflow.status import AppointmentStatus, known_raw_values, raw_values


def status_clause(status: AppointmentStatus):
    """SQL predicate matching every stored spelling of a canonical status."""
    stored = func.lower(func.trim(Appointment.status))
    if status is AppointmentStatus.UNKNOWN:
        return or_(Appointment.status.is_(None), stored.notin_(sorted(known_raw_values())))
    return stored.in_(sorted(raw_values(status)))


class CRUDAppointment(CRUDBase[Appointment, AppointmentCreate, AppointmentCreate]):
    def create_with_patient(
        self, db: Session, *, obj_in: AppointmentCreate, patient_id: str
    ) -> Appointment:
        start = to_utc_naive(obj_in.start_time)
        end = to_utc_naive(obj_in.end_time)
        db_obj = Appointment(
            patient_id=patient_id,
            doctor_id=obj_in.doctor_id,
            date=obj_in.date or start.date(),
            start_time=start,
            end_time=end,
            time=start.strftime("%H:%M"),
            status="pending",
            reason_for_visit=obj_in.reason_for_visit,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_with_details(self, db: Session, *, appointment_id: str) -> Optional[Appointment]:
        return (
            db.query(self.model)
            .options(joinedload(Appointment.doctor), joinedload(Appointment.patient))
            .filter(Appointment.id == appointment_id)
            .first()
        )

    def get_listing(
        self,
        db: Session,
        *,
        patient_id: Optional[str] = None,
        doctor_id: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
        on_date: Optional[date] = None,
        not_ended_at: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Appointment]:
        """Appointments newest first, filtered before paging.

        ``not_ended_at`` (UTC) keeps appointments whose end is still ahead;
        legacy rows without an end time are kept through their day.
        """
        query = db.query(self.model).options(
            joinedload(Appointment.doctor), joinedload(Appointment.patient)
        )
        if patient_id is not None:
            query = query.filter(Appointment.patient_id == patient_id)
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)
        if status is not None:
            query = query.filter(status_clause(status))
        if on_date is not None:
            query = query.filter(Appointment.date == on_date)
        if not_ended_at is not None:
            cutoff = to_utc_naive(not_ended_at)
            query = query.filter(
                or_(
                    and_(Appointment.end_time.isnot(None), Appointment.end_time >= cutoff),
                    and_(Appointment.end_time.is_(None), Appointment.date >= cutoff.date()),
                )
            )
        return (
            query.order_by(Appointment.date.desc(), Appointment.start_time.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_reminder_candidates(
        self, db: Session, *, window_start: datetime, window_end: datetime
    ) -> List[Appointment]:
        """Unreminded appointments starting in ``[window_start, window_end]`` (UTC-naive).

        Status is filtered by the caller so legacy spellings are honoured.
        """
        return (
            db.query(self.model)
            .filter(
                Appointment.reminder_sent.is_(False),
                Appointment.start_time.isnot(None),
                Appointment.start_time >= window_start,
                Appointment.start_time <= window_end,
            )
            .order_by(Appointment.start_time)
            .all()
        )

    def set_status(self, db: Session, *, db_obj: Appointment, status: str) -> Appointment:
        db_obj.status = status
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def mark_reminded(self, db: Session, *, db_obj: Appointment) -> Appointment:
        db_obj.reminder_sent = True
        db.add(db_obj)
        db.commit()
        return db_obj


appointment = CRUDAppointment(Appointment)
