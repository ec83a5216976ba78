import logging

import pytest

from healthaccess.workflow.exceptions import StatusTransitionError
from healthaccess.workflow.lifecycle import (
    ConsultationStatus,
    check_transition,
    classify_consultations,
    is_prescribable,
    normalize_consultation_status,
    select_prescribable,
)


def consult(cid, status):
    return {"id": cid, "consultation_status": status}


@pytest.mark.parametrize(
    "raw, prescribable",
    [
        ("ACTIVE", True),
        ("ENDED", True),
        ("active", True),
        (" Ended ", True),
        ("COMPLETED", False),
        ("CANCELLED", False),
        (None, False),
    ],
)
def test_is_prescribable(raw, prescribable):
    assert is_prescribable(raw) is prescribable


def test_unrecognised_status_is_unknown():
    assert normalize_consultation_status("PAUSED") is ConsultationStatus.UNKNOWN
    assert normalize_consultation_status(42) is ConsultationStatus.UNKNOWN


def test_select_keeps_only_active_and_ended_in_order():
    items = [
        consult("c1", "ACTIVE"),
        consult("c2", "COMPLETED"),
        consult("c3", "ENDED"),
        consult("c4", "???"),
    ]
    selection = select_prescribable(items)
    assert [c["id"] for c in selection.items] == ["c1", "c3"]
    assert selection.total == 4
    assert not selection.fallback_applied


def test_empty_selection_is_a_normal_result():
    selection = select_prescribable([consult("c1", "COMPLETED")])
    assert selection.items == []
    assert selection.total == 1
    assert not selection.fallback_applied


def test_fallback_returns_everything_and_logs(caplog):
    items = [consult("c1", "COMPLETED"), consult("c2", "CANCELLED")]
    with caplog.at_level(logging.WARNING, logger="healthaccess.workflow.lifecycle"):
        selection = select_prescribable(items, allow_fallback=True)
    assert selection.fallback_applied
    assert [c["id"] for c in selection.items] == ["c1", "c2"]
    assert "unfiltered" in caplog.text


def test_fallback_not_applied_when_something_qualifies():
    items = [consult("c1", "COMPLETED"), consult("c2", "ACTIVE")]
    selection = select_prescribable(items, allow_fallback=True)
    assert not selection.fallback_applied
    assert [c["id"] for c in selection.items] == ["c2"]


def test_fallback_on_empty_input_stays_empty():
    selection = select_prescribable([], allow_fallback=True)
    assert selection.items == []
    assert not selection.fallback_applied


def test_select_reads_attributes():
    class Row:
        def __init__(self, status):
            self.consultation_status = status

    rows = [Row("ENDED"), Row("COMPLETED")]
    assert select_prescribable(rows).items == [rows[0]]


def test_classification():
    result = classify_consultations([consult("c1", "active"), consult("c2", "weird")])
    assert result[0].status is ConsultationStatus.ACTIVE
    assert result[0].prescribable
    assert result[1].status is ConsultationStatus.UNKNOWN
    assert result[1].raw_status == "weird"
    assert not result[1].prescribable


def test_transitions():
    assert check_transition("ACTIVE", ConsultationStatus.ENDED) == "ENDED"
    assert check_transition("ended", ConsultationStatus.COMPLETED) == "COMPLETED"
    with pytest.raises(StatusTransitionError):
        check_transition("COMPLETED", ConsultationStatus.ACTIVE)
    with pytest.raises(StatusTransitionError):
        check_transition("ENDED", ConsultationStatus.ACTIVE)
