import pytest

from healthaccess.workflow.exceptions import StatusTransitionError, UnknownStatusError
from healthaccess.workflow.status import (
    AppointmentStatus,
    can_transition,
    check_transition,
    known_raw_values,
    normalize_appointment_status,
    raw_values,
    read_status,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("approved", AppointmentStatus.APPROVED),
        ("accepted", AppointmentStatus.APPROVED),
        ("pending", AppointmentStatus.PENDING),
        ("scheduled", AppointmentStatus.PENDING),
        ("rejected", AppointmentStatus.REJECTED),
        ("cancelled", AppointmentStatus.REJECTED),
        ("completed", AppointmentStatus.COMPLETED),
    ],
)
def test_legacy_and_current_vocabularies(raw, expected):
    assert normalize_appointment_status(raw) is expected


def test_matching_ignores_case_and_whitespace():
    assert normalize_appointment_status("  Accepted ") is AppointmentStatus.APPROVED
    assert normalize_appointment_status("PENDING") is AppointmentStatus.PENDING


@pytest.mark.parametrize("raw", ["no-show", "", None, 3, ["approved"]])
def test_anything_else_is_unknown(raw):
    assert normalize_appointment_status(raw) is AppointmentStatus.UNKNOWN


def test_canonical_value_passes_through():
    assert normalize_appointment_status(AppointmentStatus.REJECTED) is AppointmentStatus.REJECTED


def test_reading_carries_soft_warning_for_unknown():
    reading = read_status("postponed")
    assert not reading.recognized
    assert isinstance(reading.warning, UnknownStatusError)
    assert reading.warning.raw == "postponed"

    assert read_status("accepted").warning is None


def test_transitions_accept_legacy_current_value():
    assert can_transition("scheduled", AppointmentStatus.APPROVED)
    assert check_transition("accepted", AppointmentStatus.COMPLETED) == "completed"
    assert check_transition("pending", AppointmentStatus.REJECTED) == "rejected"


@pytest.mark.parametrize(
    "current, target",
    [
        ("completed", AppointmentStatus.APPROVED),
        ("cancelled", AppointmentStatus.APPROVED),
        ("pending", AppointmentStatus.COMPLETED),
        ("mystery", AppointmentStatus.APPROVED),
    ],
)
def test_disallowed_transitions(current, target):
    assert not can_transition(current, target)
    with pytest.raises(StatusTransitionError):
        check_transition(current, target)


def test_raw_values_list_every_stored_spelling():
    assert raw_values(AppointmentStatus.APPROVED) == {"approved", "accepted"}
    assert raw_values(AppointmentStatus.REJECTED) == {"rejected", "cancelled"}
    assert raw_values(AppointmentStatus.UNKNOWN) == frozenset()
    assert "scheduled" in known_raw_values()
