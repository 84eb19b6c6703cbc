"""Pydantic models for vitals API requests and responses."""
from .vital import (
    VitalTypeCreate,
    VitalType,
    ReadingCreate,
    PanelCreate,
    VitalReading,
    AlertAssessment,
    TrendSummary,
    ReadingResponse,
    PanelResponse,
    PatientTrend,
)
from .alerts import VitalAlert

__all__ = [
    "VitalTypeCreate",
    "VitalType",
    "ReadingCreate",
    "PanelCreate",
    "VitalReading",
    "AlertAssessment",
    "TrendSummary",
    "ReadingResponse",
    "PanelResponse",
    "PatientTrend",
    "VitalAlert",
]
