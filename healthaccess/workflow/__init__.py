"""Consultation workflow rules.

This package contains:
- the appointment status normalizer (legacy and current vocabularies)
- the join/start eligibility gate for booked consultations
- the consultation lifecycle tracker that decides prescribability
- the prescription composer that validates form rows into a payload

Everything here is synchronous and free of I/O so it can be unit-tested
without the service layer.
"""

from .exceptions import (
    CollaboratorFailure,
    DuplicateConsultationError,
    StatusTransitionError,
    UnknownStatusError,
    ValidationError,
)
from .status import AppointmentStatus, normalize_appointment_status, read_status
from .eligibility import Eligibility, WindowState, evaluate_appointment, evaluate_window, join_decision
from .lifecycle import ConsultationStatus, is_prescribable, select_prescribable
from .composer import PrescriptionDraft, compose_prescription
