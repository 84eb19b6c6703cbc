"""Vital template and reading models."""
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, Literal

AlertLevelName = Literal["normal", "warning", "critical", "emergency"]
TrendName = Literal["stable", "increasing", "decreasing", "insufficient_data"]


class VitalTypeCreate(BaseModel):
    """Request body for a new vital template."""

    name: str = Field(min_length=1, max_length=100)
    unit: str = Field(min_length=1, max_length=20)
    normal_range_min: Optional[float] = None
    normal_range_max: Optional[float] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self):
        low, high = self.normal_range_min, self.normal_range_max
        if low is not None and high is not None and low > high:
            raise ValueError("normal_range_min must not exceed normal_range_max")
        return self


class VitalType(BaseModel):
    """Stored vital template."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    unit: str
    normal_range_min: Optional[float] = None
    normal_range_max: Optional[float] = None
    description: Optional[str] = None


class ReadingCreate(BaseModel):
    """Request body for recording a single reading."""

    patient_id: str = Field(min_length=1)
    vital_type_id: str = Field(min_length=1)
    value: float
    unit: Optional[str] = None
    notes: Optional[str] = None
    reading_time: Optional[str] = Field(
        default=None, description="ISO-8601 timestamp; defaults to now"
    )


class PanelCreate(BaseModel):
    """Request body for a composite vital-signs panel."""

    patient_id: str = Field(min_length=1)
    systolic: Optional[float] = None
    diastolic: Optional[float] = None
    pulse_rate: Optional[float] = None
    temperature_c: Optional[float] = None
    oxygen_saturation: Optional[float] = None
    respiratory_rate: Optional[float] = None


class VitalReading(BaseModel):
    """Stored reading with its classification."""

    id: str
    patient_id: str
    vital_type_id: str
    vital_name: str
    value: float
    unit: str
    notes: Optional[str] = None
    alert_level: AlertLevelName
    alert_reasons: list[str]
    is_flagged: bool
    reading_time: str
    created_at: str


class AlertAssessment(BaseModel):
    """Classifier output."""

    alert_level: AlertLevelName
    reasons: list[str]
    recommended_actions: list[str]


class TrendSummary(BaseModel):
    """Trend of a value against recent readings."""

    trend: TrendName
    change: float
    percent_change: float
    average: float
    sample_count: int
    window_days: int


class ReadingResponse(BaseModel):
    """Response for a recorded reading."""

    reading: VitalReading
    alert: AlertAssessment
    trend: TrendSummary
    alert_id: Optional[str] = None


class PanelResponse(BaseModel):
    """Response for an assessed panel."""

    alert: AlertAssessment
    alert_id: Optional[str] = None


class PatientTrend(BaseModel):
    """Trend of a patient's latest reading for one vital type."""

    patient_id: str
    vital_type_id: str
    vital_name: str
    current_value: float
    reading_time: str
    trend: TrendSummary
