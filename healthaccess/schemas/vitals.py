from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from enum import Enum


class AlertLevel(str, Enum):
    """Severity derived from the recorded measurements"""
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class BloodPressure(BaseModel):
    systolic: int = Field(..., gt=0, lt=400)
    diastolic: int = Field(..., gt=0, lt=300)


class VitalRecordBase(BaseModel):
    heart_rate: Optional[int] = Field(default=None, gt=0, lt=400)
    blood_pressure: Optional[BloodPressure] = None
    temperature: Optional[float] = Field(default=None, gt=20, lt=50)
    oxygen_saturation: Optional[float] = Field(default=None, ge=0, le=100)
    weight: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)
    notes: Optional[str] = None


class VitalRecordCreate(VitalRecordBase):
    # Required when a doctor or health worker records for a patient
    patient_id: Optional[str] = None
    recorded_at: Optional[datetime] = None

    @model_validator(mode="after")
    def at_least_one_measurement(self) -> "VitalRecordCreate":
        measured = [
            self.heart_rate,
            self.blood_pressure,
            self.temperature,
            self.oxygen_saturation,
            self.weight,
            self.height,
        ]
        if all(value is None for value in measured):
            raise ValueError("At least one measurement is required")
        return self


class VitalRecordUpdate(VitalRecordBase):
    pass


class VitalRecord(VitalRecordBase):
    id: str
    patient_id: str
    recorded_by_id: str
    alert_level: AlertLevel
    recorded_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True

    @model_validator(mode="before")
    @classmethod
    def collect_blood_pressure(cls, data):
        # ORM rows store the pair as two columns
        if hasattr(data, "systolic") and not isinstance(data, dict):
            systolic, diastolic = data.systolic, data.diastolic
            data = {
                key: getattr(data, key)
                for key in (
                    "id", "patient_id", "recorded_by_id", "heart_rate", "temperature",
                    "oxygen_saturation", "weight", "height", "notes", "alert_level",
                    "recorded_at", "created_at",
                )
            }
            if systolic is not None and diastolic is not None:
                data["blood_pressure"] = {"systolic": systolic, "diastolic": diastolic}
        return data
