from datetime import datetime, timedelta, timezone

import pytest

from healthaccess.workflow.eligibility import (
    ENDED_LABEL,
    READY_LABEL,
    STARTED_LABEL,
    WindowState,
    countdown_label,
    evaluate_appointment,
    evaluate_window,
    join_decision,
)
from healthaccess.workflow.status import AppointmentStatus

START = datetime(2025, 6, 2, 10, 0, tzinfo=timezone.utc)
END = datetime(2025, 6, 2, 10, 30, tzinfo=timezone.utc)


def at(minutes_from_start: float) -> datetime:
    return START + timedelta(minutes=minutes_from_start)


@pytest.mark.parametrize(
    "offset, eligible",
    [
        (-6, False),
        (-5, True),
        (-4, True),
        (0, True),
        (15, True),
        (30, True),
        (31, False),
    ],
)
def test_window_boundaries(offset, eligible):
    assert evaluate_window(START, END, at(offset)).eligible is eligible


def test_just_before_the_window_opens():
    result = evaluate_window(START, END, at(-5) - timedelta(milliseconds=1))
    assert not result.eligible
    assert result.state == WindowState.UPCOMING


def test_open_window_is_labelled_ready():
    result = evaluate_window(START, END, at(-4))
    assert result.state == WindowState.OPEN
    assert result.label == READY_LABEL
    assert result.seconds_until_open == 0
    assert result.opens_at == at(-5)
    assert result.closes_at == END


def test_upcoming_window_has_countdown():
    result = evaluate_window(START, END, at(-20))
    assert result.state == WindowState.UPCOMING
    assert result.label == "Starts in 20m"
    assert result.seconds_until_open == 15 * 60


def test_ended_window():
    result = evaluate_window(START, END, at(45))
    assert result.state == WindowState.ENDED
    assert result.label == ENDED_LABEL
    assert not result.eligible


def test_naive_times_are_treated_as_utc():
    naive_start = START.replace(tzinfo=None)
    naive_end = END.replace(tzinfo=None)
    assert evaluate_window(naive_start, naive_end, at(-1)).eligible


def test_other_timezones_compare_by_instant():
    karachi = timezone(timedelta(hours=5))
    now = datetime(2025, 6, 2, 14, 57, tzinfo=karachi)  # 09:57 UTC
    assert evaluate_window(START, END, now).eligible


@pytest.mark.parametrize(
    "start, end",
    [(None, END), (START, None), (None, None), (END, START)],
)
def test_missing_or_inverted_times_are_unscheduled(start, end):
    result = evaluate_window(start, end, at(0))
    assert result.state == WindowState.UNSCHEDULED
    assert not result.eligible


@pytest.mark.parametrize(
    "offset, label",
    [
        (-20, "Starts in 20m"),
        (-90, "Starts in 1h 30m"),
        (-125.5, "Starts in 2h 5m"),
        (-0.5, "Starts in 0m"),
        (1, STARTED_LABEL),
    ],
)
def test_countdown_label(offset, label):
    assert countdown_label(START, at(offset)) == label


def test_appointment_mapping_with_iso_strings():
    appointment = {
        "status": "accepted",
        "startTime": "2025-06-02T10:00:00Z",
        "endTime": "2025-06-02T10:30:00Z",
    }
    assert evaluate_appointment(appointment, at(-4)).eligible


def test_legacy_appointment_without_times_is_unscheduled():
    appointment = {"status": "scheduled", "date": "2025-06-02", "time": "10:00"}
    assert evaluate_appointment(appointment, at(0)).state == WindowState.UNSCHEDULED


def test_unparseable_times_are_unscheduled():
    appointment = {"start_time": "tomorrow", "end_time": "later"}
    assert evaluate_appointment(appointment, at(0)).state == WindowState.UNSCHEDULED


class _Record:
    def __init__(self, status, start_time, end_time):
        self.status = status
        self.start_time = start_time
        self.end_time = end_time


def test_join_requires_approved_status():
    pending = _Record("pending", START, END)
    decision = join_decision(pending, at(0))
    assert decision.window.eligible
    assert decision.status is AppointmentStatus.PENDING
    assert not decision.allowed

    approved = _Record("accepted", START, END)
    assert join_decision(approved, at(0)).allowed


def test_join_refused_outside_window():
    approved = _Record("approved", START, END)
    assert not join_decision(approved, at(-6)).allowed
    assert not join_decision(approved, at(31)).allowed


def test_unknown_status_never_joins():
    record = _Record("on-hold", START, END)
    decision = join_decision(record, at(0))
    assert decision.status is AppointmentStatus.UNKNOWN
    assert not decision.allowed


def test_booked_slot_scenario():
    appointment = {
        "status": "approved",
        "startTime": "2024-06-01T10:00:00Z",
        "endTime": "2024-06-01T10:30:00Z",
    }
    ready = evaluate_appointment(appointment, datetime(2024, 6, 1, 9, 56, tzinfo=timezone.utc))
    assert ready.eligible and ready.label == "ready"

    early = evaluate_appointment(appointment, datetime(2024, 6, 1, 9, 40, tzinfo=timezone.utc))
    assert not early.eligible and early.label == "Starts in 20m"


def test_repeated_evaluation_is_identical():
    now = at(-12)
    assert evaluate_window(START, END, now) == evaluate_window(START, END, now)
