"""
Vital Alert Classifier.

Classifies a single vital-sign reading against its template's normal range
and a small table of named-vital thresholds, and computes a short-window
trend of a new value against recent history.

Both operations are pure: they read only their arguments and return a fresh
result, so a single classifier instance can be shared freely.
"""

import logging
import statistics
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Tuple, Union

from .models import (
    AlertLevel,
    AlertResult,
    Trend,
    TrendResult,
    VitalCode,
    VitalReading,
    VitalTemplate,
    ensure_finite,
)

logger = logging.getLogger(__name__)

HistoryEntry = Union[VitalReading, Tuple[float, datetime]]

ACTION_MONITOR = "Monitor closely and consult provider"
ACTION_CONSULT = "Seek immediate medical consultation"
ACTION_EMERGENCY = "Seek emergency care immediately"


class VitalAlertClassifier:
    """
    Rule-based alert classification for vital-sign readings.

    Configuration:
        low_critical_factor: Below min * factor is critical
        high_critical_factor: Above max * factor is critical
        stable_percent: |percent change| under this is a stable trend
    """

    # Absolute thresholds that apply regardless of the template's range
    NAMED_THRESHOLDS = {
        VitalCode.BLOOD_PRESSURE: {
            "emergency_high": 180,
        },
        VitalCode.HEART_RATE: {
            "critical_high": 120,
            "critical_low": 50,
            "emergency_high": 150,
            "emergency_low": 40,
        },
    }

    def __init__(
        self,
        low_critical_factor: float = 0.8,
        high_critical_factor: float = 1.2,
        stable_percent: float = 5.0,
    ):
        self.low_critical_factor = low_critical_factor
        self.high_critical_factor = high_critical_factor
        self.stable_percent = stable_percent

    def classify(self, value: float, template: VitalTemplate) -> AlertResult:
        """
        Classify a reading against its template.

        Args:
            value: The measured value
            template: Vital template with unit and optional normal bounds

        Returns:
            AlertResult with level, reasons and recommended actions

        Raises:
            InvalidReadingError: If value is NaN or infinite
        """
        value = ensure_finite(value)
        result = AlertResult()

        self._check_range(value, template, result)

        if template.code == VitalCode.BLOOD_PRESSURE:
            self._check_blood_pressure(value, result)
        elif template.code == VitalCode.HEART_RATE:
            self._check_heart_rate(value, result)

        if result.is_normal:
            logger.debug(f"[CLASSIFIER] {template.name}={value} {template.unit}: normal")
        else:
            logger.info(
                f"[CLASSIFIER] {template.name}={value} {template.unit}: "
                f"{result.alert_level.value} ({'; '.join(result.reasons)})"
            )
        return result

    def _check_range(self, value: float, template: VitalTemplate, result: AlertResult) -> None:
        low = template.normal_range.min
        high = template.normal_range.max

        if low is not None and value < low:
            if value < low * self.low_critical_factor:
                result.raise_to(
                    AlertLevel.CRITICAL,
                    "Value significantly below normal range",
                    ACTION_CONSULT,
                )
            else:
                result.raise_to(AlertLevel.WARNING, "Value below normal range", ACTION_MONITOR)

        if high is not None and value > high:
            if value > high * self.high_critical_factor:
                result.raise_to(
                    AlertLevel.CRITICAL,
                    "Value significantly above normal range",
                    ACTION_CONSULT,
                )
            else:
                result.raise_to(AlertLevel.WARNING, "Value above normal range", ACTION_MONITOR)

    def _check_blood_pressure(self, value: float, result: AlertResult) -> None:
        limits = self.NAMED_THRESHOLDS[VitalCode.BLOOD_PRESSURE]
        if value > limits["emergency_high"]:
            result.raise_to(
                AlertLevel.EMERGENCY,
                "Hypertensive crisis detected",
                ACTION_EMERGENCY,
            )

    def _check_heart_rate(self, value: float, result: AlertResult) -> None:
        limits = self.NAMED_THRESHOLDS[VitalCode.HEART_RATE]

        if value > limits["emergency_high"]:
            result.raise_to(AlertLevel.EMERGENCY, "Severe tachycardia detected", ACTION_EMERGENCY)
        elif value > limits["critical_high"]:
            result.raise_to(AlertLevel.CRITICAL, "Tachycardia detected", ACTION_CONSULT)
        elif value < limits["emergency_low"]:
            result.raise_to(AlertLevel.EMERGENCY, "Severe bradycardia detected", ACTION_EMERGENCY)
        elif value < limits["critical_low"]:
            result.raise_to(AlertLevel.CRITICAL, "Bradycardia detected", ACTION_CONSULT)

    def compute_trend(
        self,
        current_value: float,
        history: Iterable[HistoryEntry],
        window_days: int = 7,
        now: Optional[datetime] = None,
    ) -> TrendResult:
        """
        Compare a new value with the average of recent readings.

        Args:
            current_value: The new reading
            history: Prior readings as VitalReading or (value, timestamp) pairs
            window_days: Only readings this recent, and not after now, are considered
            now: Reference time (defaults to now, UTC)

        Returns:
            TrendResult; INSUFFICIENT_DATA when fewer than 2 readings remain
        """
        current_value = ensure_finite(current_value, "current_value")
        if now is None:
            now = datetime.now(timezone.utc)
        now = _as_utc(now)
        cutoff = now - timedelta(days=window_days)

        values = []
        for entry in history:
            value, recorded_at = _unpack(entry)
            if cutoff <= _as_utc(recorded_at) <= now:
                values.append(ensure_finite(value))

        if len(values) < 2:
            logger.debug(f"[TREND] Insufficient data: {len(values)} readings in {window_days}d")
            return TrendResult(
                trend=Trend.INSUFFICIENT_DATA,
                average=round(values[0], 2) if values else 0.0,
                sample_count=len(values),
            )

        average = statistics.fmean(values)
        change = current_value - average

        if average == 0:
            percent_change = 0.0
            if change == 0:
                trend = Trend.STABLE
            else:
                trend = Trend.INCREASING if change > 0 else Trend.DECREASING
        else:
            percent_change = change / average * 100
            if abs(percent_change) < self.stable_percent:
                trend = Trend.STABLE
            else:
                trend = Trend.INCREASING if change > 0 else Trend.DECREASING

        return TrendResult(
            trend=trend,
            change=round(change, 2),
            percent_change=round(percent_change, 2),
            average=round(average, 2),
            sample_count=len(values),
        )


def _unpack(entry: HistoryEntry) -> Tuple[float, datetime]:
    if isinstance(entry, VitalReading):
        return entry.value, entry.recorded_at
    value, recorded_at = entry
    return value, recorded_at


def _as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


# Shared instance; the classifier holds configuration only
vital_classifier = VitalAlertClassifier()


def classify(value: float, template: VitalTemplate) -> AlertResult:
    """Classify a reading with the default classifier."""
    return vital_classifier.classify(value, template)


def compute_trend(
    current_value: float,
    history: Iterable[HistoryEntry],
    window_days: int = 7,
    now: Optional[datetime] = None,
) -> TrendResult:
    """Compute a trend with the default classifier."""
    return vital_classifier.compute_trend(current_value, history, window_days, now)
