"""Join/start window for booked consultations.

A consultation may be started or joined from five minutes before the booked
start time until the booked end time, both ends inclusive. ``now`` is always
passed in; nothing here reads the clock.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping, Optional

from healthaccess.utils.timezone import parse_datetime, to_utc_aware
from .status import AppointmentStatus, normalize_appointment_status

JOIN_WINDOW_LEAD = timedelta(minutes=5)

READY_LABEL = "ready"
STARTED_LABEL = "Started"
ENDED_LABEL = "Ended"


class WindowState(str, Enum):
    UPCOMING = "upcoming"
    OPEN = "open"
    ENDED = "ended"
    UNSCHEDULED = "unscheduled"


@dataclass(frozen=True)
class Eligibility:
    eligible: bool
    state: WindowState
    label: Optional[str] = None
    opens_at: Optional[datetime] = None
    closes_at: Optional[datetime] = None
    seconds_until_open: Optional[int] = None


UNSCHEDULED = Eligibility(eligible=False, state=WindowState.UNSCHEDULED)


def countdown_label(start_time: datetime, now: datetime) -> str:
    """Human readable time left until ``start_time``."""
    diff = to_utc_aware(start_time) - to_utc_aware(now)
    if diff < timedelta(0):
        return STARTED_LABEL
    minutes = int(diff.total_seconds() // 60)
    hours = minutes // 60
    if hours > 0:
        return f"Starts in {hours}h {minutes % 60}m"
    return f"Starts in {minutes}m"


def evaluate_window(
    start_time: Optional[datetime],
    end_time: Optional[datetime],
    now: datetime,
    *,
    lead: timedelta = JOIN_WINDOW_LEAD,
) -> Eligibility:
    if start_time is None or end_time is None:
        return UNSCHEDULED

    start = to_utc_aware(start_time)
    end = to_utc_aware(end_time)
    current = to_utc_aware(now)
    if end < start:
        return UNSCHEDULED

    opens_at = start - lead
    if current > end:
        return Eligibility(False, WindowState.ENDED, ENDED_LABEL, opens_at, end)
    if current >= opens_at:
        return Eligibility(True, WindowState.OPEN, READY_LABEL, opens_at, end, 0)
    return Eligibility(
        False,
        WindowState.UPCOMING,
        countdown_label(start, current),
        opens_at,
        end,
        int((opens_at - current).total_seconds()),
    )


def _field(record: Any, *names: str) -> Any:
    for name in names:
        if isinstance(record, Mapping):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None:
            return value
    return None


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return parse_datetime(value)
    return None


def evaluate_appointment(
    appointment: Any, now: datetime, *, lead: timedelta = JOIN_WINDOW_LEAD
) -> Eligibility:
    """Gate an appointment record (ORM object, schema or plain mapping).

    Legacy records that only carry ``date`` and a free-form ``time`` are
    reported as unscheduled.
    """
    start = _as_datetime(_field(appointment, "start_time", "startTime"))
    end = _as_datetime(_field(appointment, "end_time", "endTime"))
    return evaluate_window(start, end, now, lead=lead)


@dataclass(frozen=True)
class JoinDecision:
    allowed: bool
    status: AppointmentStatus
    window: Eligibility


def join_decision(
    appointment: Any, now: datetime, *, lead: timedelta = JOIN_WINDOW_LEAD
) -> JoinDecision:
    """Only approved appointments inside their window may be joined."""
    status = normalize_appointment_status(_field(appointment, "status"))
    window = evaluate_appointment(appointment, now, lead=lead)
    allowed = status is AppointmentStatus.APPROVED and window.eligible
    return JoinDecision(allowed=allowed, status=status, window=window)
