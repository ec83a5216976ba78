import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.core.periodic import PeriodicTask
from healthaccess.services.events import CONSULTATION_REMINDER, EventPublisher
from healthaccess.utils.timezone import to_utc_aware, to_utc_naive, utcnow
from healthaccess.workflow.eligibility import JOIN_WINDOW_LEAD
from healthaccess.workflow.status import AppointmentStatus, normalize_appointment_status

logger = logging.getLogger(__name__)

REMINDER_MESSAGE = "Your consultation starts in 5 minutes"


class ConsultationReminderDispatcher:
    """Reminds both parties once an approved appointment enters its join lead window."""

    def __init__(
        self,
        publisher: EventPublisher,
        session_factory: Callable[[], Session],
        interval: float = 30,
        clock: Callable[[], datetime] = utcnow,
        lead: timedelta = JOIN_WINDOW_LEAD,
    ):
        self.publisher = publisher
        self._session_factory = session_factory
        self._clock = clock
        self.lead = lead
        self.task = PeriodicTask("Consultation reminder scan", self.run_once, interval)

    async def start(self):
        await self.task.start()

    async def stop(self):
        await self.task.stop()

    async def run_once(self, now: Optional[datetime] = None) -> int:
        """Send due reminders; returns how many appointments were reminded."""
        current = to_utc_aware(now or self._clock())
        db = self._session_factory()
        try:
            candidates = crud.appointment.get_reminder_candidates(
                db,
                window_start=to_utc_naive(current),
                window_end=to_utc_naive(current + self.lead),
            )
            reminded = 0
            for appointment in candidates:
                if normalize_appointment_status(appointment.status) is not AppointmentStatus.APPROVED:
                    continue
                await self.publisher.publish_many(
                    db,
                    user_ids=[appointment.patient_id, appointment.doctor_id],
                    event=CONSULTATION_REMINDER,
                    message=REMINDER_MESSAGE,
                    payload={
                        "appointment_id": appointment.id,
                        "start_time": to_utc_aware(appointment.start_time),
                    },
                )
                crud.appointment.mark_reminded(db, db_obj=appointment)
                reminded += 1
            if reminded:
                logger.info(f"Sent consultation reminders for {reminded} appointment(s)")
            return reminded
        finally:
            db.close()
