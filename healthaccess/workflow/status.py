"""Appointment status normalization.

Appointment records arrive with two overlapping vocabularies: the legacy one
(pending, scheduled, completed, cancelled) and the current one (approved,
accepted, rejected). Everything past this module works with
``AppointmentStatus`` only.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .exceptions import StatusTransitionError, UnknownStatusError


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"
    UNKNOWN = "UNKNOWN"


_ALIASES: Dict[str, AppointmentStatus] = {
    "pending": AppointmentStatus.PENDING,
    "scheduled": AppointmentStatus.PENDING,
    "approved": AppointmentStatus.APPROVED,
    "accepted": AppointmentStatus.APPROVED,
    "rejected": AppointmentStatus.REJECTED,
    "cancelled": AppointmentStatus.REJECTED,
    "completed": AppointmentStatus.COMPLETED,
}

# Value persisted when the service itself writes a status.
STORAGE_VALUES: Dict[AppointmentStatus, str] = {
    AppointmentStatus.PENDING: "pending",
    AppointmentStatus.APPROVED: "approved",
    AppointmentStatus.REJECTED: "rejected",
    AppointmentStatus.COMPLETED: "completed",
}

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.APPROVED, AppointmentStatus.REJECTED}),
    AppointmentStatus.APPROVED: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.REJECTED}),
    AppointmentStatus.REJECTED: frozenset(),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.UNKNOWN: frozenset(),
}


@dataclass(frozen=True)
class StatusReading:
    status: AppointmentStatus
    raw: object

    @property
    def recognized(self) -> bool:
        return self.status is not AppointmentStatus.UNKNOWN

    @property
    def warning(self) -> Optional[UnknownStatusError]:
        if self.recognized:
            return None
        return UnknownStatusError(self.raw)


def normalize_appointment_status(raw: object) -> AppointmentStatus:
    """Map any raw status onto the canonical set. Never raises."""
    if isinstance(raw, AppointmentStatus):
        return raw
    if not isinstance(raw, str):
        return AppointmentStatus.UNKNOWN
    return _ALIASES.get(raw.strip().lower(), AppointmentStatus.UNKNOWN)


def raw_values(status: AppointmentStatus) -> FrozenSet[str]:
    """Lower-cased stored spellings that read as ``status``.

    Empty for UNKNOWN, which is everything outside ``known_raw_values()``.
    """
    return frozenset(raw for raw, canonical in _ALIASES.items() if canonical is status)


def known_raw_values() -> FrozenSet[str]:
    return frozenset(_ALIASES)


def read_status(raw: object) -> StatusReading:
    return StatusReading(status=normalize_appointment_status(raw), raw=raw)


def storage_value(status: AppointmentStatus) -> str:
    return STORAGE_VALUES[status]


def can_transition(current: object, target: AppointmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[normalize_appointment_status(current)]


def check_transition(current: object, target: AppointmentStatus) -> str:
    """Validate a lifecycle move and return the raw value to store."""
    canonical = normalize_appointment_status(current)
    if target not in ALLOWED_TRANSITIONS[canonical]:
        raise StatusTransitionError("appointment", canonical.value, target.value)
    return storage_value(target)
