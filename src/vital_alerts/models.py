"""
Data model for vital-sign alerting.

Templates describe the reference range of a vital type, readings are single
observations, and the result types carry what the classifier computed.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class InvalidReadingError(ValueError):
    """Raised when a reading value is not a finite number."""


class AlertLevel(str, Enum):
    """Ordered alert severity: NORMAL < WARNING < CRITICAL < EMERGENCY."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"
    EMERGENCY = "emergency"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def escalate(self, other: "AlertLevel") -> "AlertLevel":
        """Return the more severe of the two levels."""
        return other if other.rank > self.rank else self


_LEVEL_ORDER = [
    AlertLevel.NORMAL,
    AlertLevel.WARNING,
    AlertLevel.CRITICAL,
    AlertLevel.EMERGENCY,
]


class Trend(str, Enum):
    """Direction of a new value relative to recent history."""

    STABLE = "stable"
    INCREASING = "increasing"
    DECREASING = "decreasing"
    INSUFFICIENT_DATA = "insufficient_data"


class VitalCode(str, Enum):
    """Known vital types, resolved once from a template's display name."""

    BLOOD_PRESSURE = "blood_pressure"
    HEART_RATE = "heart_rate"
    PULSE = "pulse"
    BODY_TEMPERATURE = "body_temperature"
    BLOOD_GLUCOSE = "blood_glucose"
    OXYGEN_SATURATION = "oxygen_saturation"
    RESPIRATORY_RATE = "respiratory_rate"
    WEIGHT = "weight"
    HEIGHT = "height"
    BMI = "bmi"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str) -> "VitalCode":
        """
        Resolve a display name such as "Blood Pressure" to a code.

        Names are lower-cased and runs of non-alphanumerics collapse to "_"
        before lookup, so "blood-pressure" and "Blood  Pressure" match too.
        A few common aliases are accepted; anything else is OTHER.
        """
        slug = normalize_vital_name(name)
        try:
            return cls(slug)
        except ValueError:
            return _ALIASES.get(slug, cls.OTHER)


_ALIASES = {
    "bp": VitalCode.BLOOD_PRESSURE,
    "systolic_blood_pressure": VitalCode.BLOOD_PRESSURE,
    "hr": VitalCode.HEART_RATE,
    "resting_heart_rate": VitalCode.HEART_RATE,
    "temperature": VitalCode.BODY_TEMPERATURE,
    "glucose": VitalCode.BLOOD_GLUCOSE,
    "spo2": VitalCode.OXYGEN_SATURATION,
    "blood_oxygen": VitalCode.OXYGEN_SATURATION,
    "body_mass_index": VitalCode.BMI,
}


def normalize_vital_name(name: str) -> str:
    """Lower-case a display name and collapse separators to underscores."""
    return re.sub(r"[^a-z0-9]+", "_", (name or "").lower()).strip("_")


def ensure_finite(value: float, field_name: str = "value") -> float:
    """Return value as float, raising InvalidReadingError for NaN/inf."""
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidReadingError(f"Invalid reading {field_name}: {value!r}") from e
    if not math.isfinite(number):
        raise InvalidReadingError(f"Invalid reading {field_name}: {value!r}")
    return number


@dataclass(frozen=True)
class NormalRange:
    """Reference bounds; None means no limit on that side."""

    min: Optional[float] = None
    max: Optional[float] = None

    def __post_init__(self):
        for bound in ("min", "max"):
            if getattr(self, bound) is not None:
                ensure_finite(getattr(self, bound), f"normal range {bound}")

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class VitalTemplate:
    """Reference metadata for a category of vital measurement."""

    name: str
    unit: str
    normal_range: NormalRange = field(default_factory=NormalRange)
    code: Optional[VitalCode] = None

    def __post_init__(self):
        if self.code is None:
            object.__setattr__(self, "code", VitalCode.from_name(self.name))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "unit": self.unit,
            "code": self.code.value,
            "normal_range": self.normal_range.to_dict(),
        }


@dataclass(frozen=True)
class VitalReading:
    """One timestamped observation."""

    value: float
    unit: str = ""
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class AlertResult:
    """Outcome of classifying a reading."""

    alert_level: AlertLevel = AlertLevel.NORMAL
    reasons: list = field(default_factory=list)
    recommended_actions: list = field(default_factory=list)

    def raise_to(self, level: AlertLevel, reason: str, action: str) -> None:
        """Escalate (never lower) the level and record why."""
        self.alert_level = self.alert_level.escalate(level)
        self.reasons.append(reason)
        self.recommended_actions.append(action)

    @property
    def is_normal(self) -> bool:
        return self.alert_level == AlertLevel.NORMAL

    def to_dict(self) -> dict:
        return {
            "alert_level": self.alert_level.value,
            "reasons": list(self.reasons),
            "recommended_actions": list(self.recommended_actions),
        }


@dataclass(frozen=True)
class TrendResult:
    """Short-window trend of a new value against recent readings."""

    trend: Trend
    change: float = 0.0
    percent_change: float = 0.0
    average: float = 0.0
    sample_count: int = 0

    def to_dict(self) -> dict:
        return {
            "trend": self.trend.value,
            "change": self.change,
            "percent_change": self.percent_change,
            "average": self.average,
            "sample_count": self.sample_count,
        }


@dataclass(frozen=True)
class VitalSignsPanel:
    """A set of simultaneous measurements; every field is optional."""

    systolic: Optional[float] = None
    diastolic: Optional[float] = None
    pulse_rate: Optional[float] = None
    temperature_c: Optional[float] = None
    oxygen_saturation: Optional[float] = None
    respiratory_rate: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "systolic": self.systolic,
            "diastolic": self.diastolic,
            "pulse_rate": self.pulse_rate,
            "temperature_c": self.temperature_c,
            "oxygen_saturation": self.oxygen_saturation,
            "respiratory_rate": self.respiratory_rate,
        }
