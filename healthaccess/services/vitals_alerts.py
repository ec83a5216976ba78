"""Alert level for a set of vital signs.

Each reading is compared with adult resting ranges; the record takes the most
severe level any single reading reaches.
"""
from typing import List, Optional, Tuple

from healthaccess.schemas.vitals import AlertLevel

_SEVERITY = {AlertLevel.NORMAL: 0, AlertLevel.WARNING: 1, AlertLevel.CRITICAL: 2}


def alert_findings(
    heart_rate: Optional[int] = None,
    systolic: Optional[int] = None,
    diastolic: Optional[int] = None,
    temperature: Optional[float] = None,
    oxygen_saturation: Optional[float] = None,
) -> List[Tuple[AlertLevel, str]]:
    findings = []

    if heart_rate is not None:
        if heart_rate < 40 or heart_rate > 130:
            findings.append((AlertLevel.CRITICAL, f"heart rate {heart_rate} bpm"))
        elif heart_rate < 50 or heart_rate > 100:
            findings.append((AlertLevel.WARNING, f"heart rate {heart_rate} bpm"))

    if systolic is not None and diastolic is not None:
        reading = f"blood pressure {systolic}/{diastolic} mmHg"
        if systolic >= 180 or diastolic >= 120 or systolic < 90:
            findings.append((AlertLevel.CRITICAL, reading))
        elif systolic >= 140 or diastolic >= 90:
            findings.append((AlertLevel.WARNING, reading))

    if temperature is not None:
        if temperature >= 39.5 or temperature < 35.0:
            findings.append((AlertLevel.CRITICAL, f"temperature {temperature} C"))
        elif temperature >= 38.0:
            findings.append((AlertLevel.WARNING, f"temperature {temperature} C"))

    if oxygen_saturation is not None:
        if oxygen_saturation < 90:
            findings.append((AlertLevel.CRITICAL, f"oxygen saturation {oxygen_saturation}%"))
        elif oxygen_saturation < 95:
            findings.append((AlertLevel.WARNING, f"oxygen saturation {oxygen_saturation}%"))

    return findings


def compute_alert_level(**readings) -> AlertLevel:
    level = AlertLevel.NORMAL
    for finding_level, _ in alert_findings(**readings):
        if _SEVERITY[finding_level] > _SEVERITY[level]:
            level = finding_level
    return level
