import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Sequence

from .exceptions import StatusTransitionError

logger = logging.getLogger(__name__)


class ConsultationStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"
    COMPLETED = "COMPLETED"
    UNKNOWN = "UNKNOWN"


PRESCRIBABLE_STATUSES: FrozenSet[ConsultationStatus] = frozenset(
    {ConsultationStatus.ACTIVE, ConsultationStatus.ENDED}
)

ALLOWED_TRANSITIONS: Dict[ConsultationStatus, FrozenSet[ConsultationStatus]] = {
    ConsultationStatus.ACTIVE: frozenset({ConsultationStatus.ENDED, ConsultationStatus.COMPLETED}),
    ConsultationStatus.ENDED: frozenset({ConsultationStatus.COMPLETED}),
    ConsultationStatus.COMPLETED: frozenset(),
    ConsultationStatus.UNKNOWN: frozenset(),
}


def normalize_consultation_status(raw: object) -> ConsultationStatus:
    if isinstance(raw, ConsultationStatus):
        return raw
    if not isinstance(raw, str):
        return ConsultationStatus.UNKNOWN
    try:
        return ConsultationStatus(raw.strip().upper())
    except ValueError:
        return ConsultationStatus.UNKNOWN


def is_prescribable(raw: object) -> bool:
    return normalize_consultation_status(raw) in PRESCRIBABLE_STATUSES


def check_transition(current: object, target: ConsultationStatus) -> str:
    canonical = normalize_consultation_status(current)
    if target not in ALLOWED_TRANSITIONS[canonical]:
        raise StatusTransitionError("consultation", canonical.value, target.value)
    return target.value


def _status_of(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("consultation_status")
    return getattr(item, "consultation_status", None)


@dataclass
class PrescribableSelection:
    items: List[Any] = field(default_factory=list)
    total: int = 0
    fallback_applied: bool = False


def select_prescribable(
    consultations: Iterable[Any],
    *,
    allow_fallback: bool = False,
    status_of: Callable[[Any], Any] = _status_of,
) -> PrescribableSelection:
    """Keep consultations a prescription may be written against.

    With ``allow_fallback`` an empty result is widened to the full list so an
    operator can see what exists; this is logged every time it happens.
    """
    everything = list(consultations)
    eligible = [c for c in everything if is_prescribable(status_of(c))]
    if not eligible and everything and allow_fallback:
        logger.warning(
            "No ACTIVE or ENDED consultations among %d; returning unfiltered list",
            len(everything),
        )
        return PrescribableSelection(items=everything, total=len(everything), fallback_applied=True)
    return PrescribableSelection(items=eligible, total=len(everything))


@dataclass(frozen=True)
class ConsultationClassification:
    item: Any
    status: ConsultationStatus
    raw_status: Any
    prescribable: bool


def classify_consultations(
    consultations: Sequence[Any], *, status_of: Callable[[Any], Any] = _status_of
) -> List[ConsultationClassification]:
    result = []
    for item in consultations:
        raw = status_of(item)
        status = normalize_consultation_status(raw)
        result.append(
            ConsultationClassification(
                item=item,
                status=status,
                raw_status=raw,
                prescribable=status in PRESCRIBABLE_STATUSES,
            )
        )
    return result
