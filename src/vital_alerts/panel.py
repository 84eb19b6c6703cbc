"""
Composite vital-signs panel assessment.

Checks each measurement present on a panel against fixed clinical
thresholds. Every check may raise the overall level, none lowers it.
"""

import logging

from .classifier import ACTION_CONSULT, ACTION_EMERGENCY, ACTION_MONITOR
from .models import AlertLevel, AlertResult, VitalSignsPanel, ensure_finite

logger = logging.getLogger(__name__)

_ACTIONS = {
    AlertLevel.WARNING: ACTION_MONITOR,
    AlertLevel.CRITICAL: ACTION_CONSULT,
    AlertLevel.EMERGENCY: ACTION_EMERGENCY,
}


def _flag(result: AlertResult, level: AlertLevel, reason: str) -> None:
    result.raise_to(level, reason, _ACTIONS[level])


def _check_blood_pressure(systolic: float, diastolic: float, result: AlertResult) -> None:
    if systolic > 180 or diastolic > 120:
        _flag(result, AlertLevel.EMERGENCY, "Hypertensive crisis")
    elif systolic < 90 or diastolic < 60:
        _flag(result, AlertLevel.CRITICAL, "Severe hypotension")
    elif systolic > 140 or diastolic > 90:
        _flag(result, AlertLevel.WARNING, "Hypertension")


def _check_pulse(pulse: float, result: AlertResult) -> None:
    if pulse > 150:
        _flag(result, AlertLevel.CRITICAL, "Severe tachycardia")
    elif pulse > 100:
        _flag(result, AlertLevel.WARNING, "Tachycardia")
    elif pulse < 40:
        _flag(result, AlertLevel.CRITICAL, "Severe bradycardia")
    elif pulse < 60:
        _flag(result, AlertLevel.WARNING, "Bradycardia")


def _check_temperature(celsius: float, result: AlertResult) -> None:
    if celsius > 40:
        _flag(result, AlertLevel.EMERGENCY, "Hyperthermia")
    elif celsius > 38:
        _flag(result, AlertLevel.WARNING, "Fever")
    elif celsius < 35:
        _flag(result, AlertLevel.CRITICAL, "Hypothermia")


def _check_oxygen(spo2: float, result: AlertResult) -> None:
    if spo2 < 85:
        _flag(result, AlertLevel.EMERGENCY, "Severe hypoxemia")
    elif spo2 < 95:
        _flag(result, AlertLevel.WARNING, "Hypoxemia")


def _check_respiration(rate: float, result: AlertResult) -> None:
    if rate > 30 or rate < 8:
        _flag(result, AlertLevel.CRITICAL, "Respiratory distress")
    elif rate > 24 or rate < 12:
        _flag(result, AlertLevel.WARNING, "Abnormal respiratory rate")


def assess_panel(panel: VitalSignsPanel) -> AlertResult:
    """
    Assess every measurement present on a panel.

    Blood pressure is only checked when both systolic and diastolic
    values are present.

    Raises:
        InvalidReadingError: If any present field is NaN or infinite
    """
    values = {
        name: ensure_finite(value, name)
        for name, value in panel.to_dict().items()
        if value is not None
    }
    result = AlertResult()

    if "systolic" in values and "diastolic" in values:
        _check_blood_pressure(values["systolic"], values["diastolic"], result)
    if "pulse_rate" in values:
        _check_pulse(values["pulse_rate"], result)
    if "temperature_c" in values:
        _check_temperature(values["temperature_c"], result)
    if "oxygen_saturation" in values:
        _check_oxygen(values["oxygen_saturation"], result)
    if "respiratory_rate" in values:
        _check_respiration(values["respiratory_rate"], result)

    if not result.is_normal:
        logger.info(
            f"[PANEL] {result.alert_level.value}: {', '.join(result.reasons)}"
        )
    return result
