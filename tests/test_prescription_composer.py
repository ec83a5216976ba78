from datetime import date

import pytest

from healthaccess.workflow.composer import (
    MISSING_CONSULTATION,
    NO_COMPLETE_MEDICINE,
    FOLLOW_UP_IN_PAST,
    compose_prescription,
)
from healthaccess.workflow.exceptions import ValidationError

PARACETAMOL = {
    "medicine_name": "Paracetamol",
    "dosage": "500mg",
    "frequency": "3x daily",
    "duration": "5 days",
    "instructions": "after meals",
}
BLANK_ROW = {"medicine_name": "", "dosage": "", "frequency": "", "duration": ""}


def test_incomplete_rows_are_dropped():
    draft = compose_prescription(
        "c9",
        [PARACETAMOL, BLANK_ROW, {**PARACETAMOL, "medicine_name": "Ibuprofen", "duration": "  "}],
    )
    assert [m.medicine_name for m in draft.medicines] == ["Paracetamol"]


def test_payload_shape():
    draft = compose_prescription("c9", [PARACETAMOL, BLANK_ROW])
    assert draft.as_payload() == {
        "consultationId": "c9",
        "medicines": [PARACETAMOL],
    }


def test_optional_fields_are_included_when_given():
    draft = compose_prescription(
        "c9",
        [PARACETAMOL],
        follow_up_date=date(2025, 6, 9),
        instructions="  Rest and fluids ",
    )
    payload = draft.as_payload()
    assert payload["follow_up_date"] == "2025-06-09"
    assert payload["instructions"] == "Rest and fluids"


def test_blank_instructions_are_omitted():
    draft = compose_prescription("c9", [PARACETAMOL], instructions="   ")
    assert "instructions" not in draft.as_payload()


def test_values_are_trimmed():
    row = {"medicine_name": " Amoxicillin ", "dosage": "250mg ", "frequency": " 2x", "duration": "7 days"}
    entry = compose_prescription("c1", [row]).medicines[0]
    assert entry.medicine_name == "Amoxicillin"
    assert entry.instructions == ""


@pytest.mark.parametrize("consultation_id", [None, "", "   "])
def test_consultation_is_required(consultation_id):
    with pytest.raises(ValidationError) as exc:
        compose_prescription(consultation_id, [PARACETAMOL])
    assert exc.value.message == MISSING_CONSULTATION


def test_missing_consultation_is_reported_first():
    with pytest.raises(ValidationError) as exc:
        compose_prescription(None, [BLANK_ROW])
    assert exc.value.message == MISSING_CONSULTATION


def test_at_least_one_complete_medicine():
    with pytest.raises(ValidationError) as exc:
        compose_prescription("c9", [BLANK_ROW, {"medicine_name": "Paracetamol"}])
    assert exc.value.message == NO_COMPLETE_MEDICINE


def test_follow_up_in_the_past_is_rejected():
    with pytest.raises(ValidationError) as exc:
        compose_prescription("c9", [PARACETAMOL], follow_up_date=date(2025, 6, 1), today=date(2025, 6, 2))
    assert exc.value.message == FOLLOW_UP_IN_PAST


def test_follow_up_today_is_fine():
    draft = compose_prescription("c9", [PARACETAMOL], follow_up_date=date(2025, 6, 2), today=date(2025, 6, 2))
    assert draft.follow_up_date == date(2025, 6, 2)


def test_rows_may_be_objects():
    class Row:
        medicine_name = "Cetirizine"
        dosage = "10mg"
        frequency = "once daily"
        duration = "10 days"
        instructions = None

    draft = compose_prescription("c2", [Row()])
    assert draft.medicines[0].as_dict()["medicine_name"] == "Cetirizine"


def test_two_empty_rows_raise():
    with pytest.raises(ValidationError):
        compose_prescription("c9", [BLANK_ROW, dict(BLANK_ROW)])
