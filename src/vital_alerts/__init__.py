"""
Vital Alerts Module.

Rule-based alert classification and trend detection for vital-sign readings.
"""

from .models import (
    AlertLevel,
    AlertResult,
    InvalidReadingError,
    NormalRange,
    Trend,
    TrendResult,
    VitalCode,
    VitalReading,
    VitalSignsPanel,
    VitalTemplate,
)
from .classifier import (
    VitalAlertClassifier,
    vital_classifier,
    classify,
    compute_trend,
)
from .panel import assess_panel

__all__ = [
    "AlertLevel",
    "AlertResult",
    "InvalidReadingError",
    "NormalRange",
    "Trend",
    "TrendResult",
    "VitalCode",
    "VitalReading",
    "VitalSignsPanel",
    "VitalTemplate",
    "VitalAlertClassifier",
    "vital_classifier",
    "classify",
    "compute_trend",
    "assess_panel",
]
