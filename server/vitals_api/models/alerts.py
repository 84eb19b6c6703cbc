"""Vital alert models."""
from pydantic import BaseModel
from typing import Optional

from .vital import AlertLevelName


class VitalAlert(BaseModel):
    """Stored alert raised by a non-normal reading or panel."""

    id: str
    patient_id: str
    reading_id: Optional[str] = None
    vital_name: str
    value: Optional[float] = None
    level: AlertLevelName
    reasons: list[str]
    recommended_actions: list[str]
    acknowledged: bool = False
    timestamp: str
