from typing import Optional


class WorkflowError(Exception):
    """Base class for errors raised by the consultation workflow rules."""


class ValidationError(WorkflowError):
    """Local, user-correctable input problem. Never forwarded to a collaborator."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StatusTransitionError(ValidationError):
    def __init__(self, kind: str, current: str, target: str):
        super().__init__(f"Cannot move {kind} from {current} to {target}")
        self.kind = kind
        self.current = current
        self.target = target


class UnknownStatusError(WorkflowError):
    """Soft error: a status outside the recognised vocabulary.

    The normalizers never raise this; they attach an instance to their result
    so callers can log it and fall back to "not eligible".
    """

    def __init__(self, raw: object):
        super().__init__(f"Unrecognised status value: {raw!r}")
        self.raw = raw


class DuplicateConsultationError(WorkflowError):
    def __init__(self, appointment_id: str, consultation_id: Optional[str] = None):
        super().__init__(f"Consultation already exists for appointment {appointment_id}")
        self.appointment_id = appointment_id
        self.consultation_id = consultation_id


class CollaboratorFailure(WorkflowError):
    """An outside service (push channel, cache, signaling) failed."""

    def __init__(self, collaborator: str, reason: str):
        super().__init__(f"{collaborator} failed: {reason}")
        self.collaborator = collaborator
        self.reason = reason
