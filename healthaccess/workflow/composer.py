from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .exceptions import ValidationError

REQUIRED_MEDICINE_FIELDS = ("medicine_name", "dosage", "frequency", "duration")

MISSING_CONSULTATION = "Please select a consultation"
NO_COMPLETE_MEDICINE = "Please add at least one complete medicine entry"
FOLLOW_UP_IN_PAST = "Follow-up date cannot be in the past"


@dataclass(frozen=True)
class MedicineEntry:
    medicine_name: str
    dosage: str
    frequency: str
    duration: str
    instructions: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {
            "medicine_name": self.medicine_name,
            "dosage": self.dosage,
            "frequency": self.frequency,
            "duration": self.duration,
            "instructions": self.instructions,
        }


@dataclass(frozen=True)
class PrescriptionDraft:
    consultation_id: str
    medicines: Tuple[MedicineEntry, ...]
    follow_up_date: Optional[date] = None
    instructions: Optional[str] = None

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "consultationId": self.consultation_id,
            "medicines": [m.as_dict() for m in self.medicines],
        }
        if self.follow_up_date is not None:
            payload["follow_up_date"] = self.follow_up_date.isoformat()
        if self.instructions is not None:
            payload["instructions"] = self.instructions
        return payload


def _text(row: Any, name: str) -> str:
    if isinstance(row, Mapping):
        value = row.get(name)
    else:
        value = getattr(row, name, None)
    if value is None:
        return ""
    return str(value).strip()


def complete_medicines(rows: Iterable[Any]) -> List[MedicineEntry]:
    """Drop rows missing any required field, keeping the input order."""
    entries = []
    for row in rows:
        values = {name: _text(row, name) for name in REQUIRED_MEDICINE_FIELDS}
        if not all(values.values()):
            continue
        entries.append(MedicineEntry(instructions=_text(row, "instructions"), **values))
    return entries


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def compose_prescription(
    consultation_id: Optional[str],
    medicines: Iterable[Any],
    *,
    follow_up_date: Optional[date] = None,
    instructions: Optional[str] = None,
    today: Optional[date] = None,
) -> PrescriptionDraft:
    if not consultation_id or not str(consultation_id).strip():
        raise ValidationError(MISSING_CONSULTATION)

    entries = complete_medicines(medicines)
    if not entries:
        raise ValidationError(NO_COMPLETE_MEDICINE)

    if follow_up_date is not None and today is not None and follow_up_date < today:
        raise ValidationError(FOLLOW_UP_IN_PAST)

    return PrescriptionDraft(
        consultation_id=str(consultation_id).strip(),
        medicines=tuple(entries),
        follow_up_date=follow_up_date,
        instructions=_optional_text(instructions),
    )
