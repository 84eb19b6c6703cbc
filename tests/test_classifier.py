"""
Unit tests for the vital alert classifier.

These tests verify:
1. Range-based classification (below/above, warning/critical)
2. Named-vital thresholds for blood pressure and heart rate
3. Escalation never lowers a level
4. Vital code resolution from display names
5. Rejection of non-finite values

Usage:
    pytest tests/test_classifier.py -v
"""
import math
import pytest

from vital_alerts import (
    AlertLevel,
    InvalidReadingError,
    NormalRange,
    VitalAlertClassifier,
    VitalCode,
    VitalTemplate,
    classify,
)
from vital_alerts.classifier import ACTION_CONSULT, ACTION_EMERGENCY, ACTION_MONITOR


def _template(name="Weight", low=None, high=None, unit="units"):
    return VitalTemplate(name=name, unit=unit, normal_range=NormalRange(low, high))


class TestRangeClassification:
    """Range checks on vitals without named thresholds."""

    def test_value_inside_range_is_normal(self, glucose_template):
        for value in (70, 100, 140):
            result = classify(value, glucose_template)
            assert result.alert_level == AlertLevel.NORMAL
            assert result.reasons == []
            assert result.recommended_actions == []

    def test_slightly_below_is_warning(self, glucose_template):
        result = classify(60, glucose_template)
        assert result.alert_level == AlertLevel.WARNING
        assert result.reasons == ["Value below normal range"]
        assert result.recommended_actions == [ACTION_MONITOR]

    def test_far_below_is_critical(self, glucose_template):
        # 70 * 0.8 = 56
        result = classify(55, glucose_template)
        assert result.alert_level == AlertLevel.CRITICAL
        assert result.reasons == ["Value significantly below normal range"]
        assert result.recommended_actions == [ACTION_CONSULT]

    def test_just_above_critical_factor_is_warning(self, glucose_template):
        result = classify(57, glucose_template)
        assert result.alert_level == AlertLevel.WARNING

    def test_slightly_above_is_warning(self, glucose_template):
        result = classify(150, glucose_template)
        assert result.alert_level == AlertLevel.WARNING
        assert result.reasons == ["Value above normal range"]

    def test_far_above_is_critical(self, glucose_template):
        # 140 * 1.2 = 168
        result = classify(169, glucose_template)
        assert result.alert_level == AlertLevel.CRITICAL
        assert result.reasons == ["Value significantly above normal range"]

    def test_no_bounds_is_always_normal(self):
        template = _template()
        for value in (-1000, 0, 1e9):
            result = classify(value, template)
            assert result.alert_level == AlertLevel.NORMAL
            assert result.reasons == []

    def test_only_lower_bound(self):
        template = _template(low=10)
        assert classify(1e6, template).alert_level == AlertLevel.NORMAL
        assert classify(9, template).alert_level == AlertLevel.WARNING

    def test_only_upper_bound(self):
        template = _template(high=10)
        assert classify(-1e6, template).alert_level == AlertLevel.NORMAL
        assert classify(13, template).alert_level == AlertLevel.CRITICAL

    def test_degenerate_range(self):
        template = _template(low=5, high=5)
        assert classify(5, template).alert_level == AlertLevel.NORMAL
        assert classify(5.5, template).alert_level == AlertLevel.WARNING
        assert classify(3.9, template).alert_level == AlertLevel.CRITICAL

    def test_deviation_never_lowers_level(self):
        template = _template(low=60, high=100)
        above = [classify(v, template).alert_level.rank for v in range(100, 300, 5)]
        below = [classify(v, template).alert_level.rank for v in range(60, -100, -5)]
        assert above == sorted(above)
        assert below == sorted(below)

    def test_custom_factors(self):
        classifier = VitalAlertClassifier(low_critical_factor=0.5, high_critical_factor=2.0)
        template = _template(low=100, high=100)
        assert classifier.classify(60, template).alert_level == AlertLevel.WARNING
        assert classifier.classify(190, template).alert_level == AlertLevel.WARNING
        assert classifier.classify(201, template).alert_level == AlertLevel.CRITICAL


class TestNamedVitalThresholds:
    """Absolute thresholds for blood pressure and heart rate."""

    def test_heart_rate_tachycardia_is_critical(self, heart_rate_template):
        result = classify(125, heart_rate_template)
        assert result.alert_level == AlertLevel.CRITICAL
        assert any("Tachycardia" in reason for reason in result.reasons)

    def test_heart_rate_severe_tachycardia_is_emergency(self, heart_rate_template):
        result = classify(155, heart_rate_template)
        assert result.alert_level == AlertLevel.EMERGENCY
        assert any("tachycardia" in reason.lower() for reason in result.reasons)
        assert ACTION_EMERGENCY in result.recommended_actions

    def test_heart_rate_bradycardia_is_critical(self, heart_rate_template):
        result = classify(45, heart_rate_template)
        assert result.alert_level == AlertLevel.CRITICAL
        assert "Bradycardia detected" in result.reasons

    def test_heart_rate_severe_bradycardia_is_emergency(self, heart_rate_template):
        result = classify(35, heart_rate_template)
        assert result.alert_level == AlertLevel.EMERGENCY
        assert "Severe bradycardia detected" in result.reasons

    def test_heart_rate_mildly_high_is_warning(self, heart_rate_template):
        result = classify(110, heart_rate_template)
        assert result.alert_level == AlertLevel.WARNING
        assert result.reasons == ["Value above normal range"]

    def test_heart_rate_threshold_applies_without_range(self):
        template = _template(name="Heart Rate")
        assert classify(121, template).alert_level == AlertLevel.CRITICAL
        assert classify(120, template).alert_level == AlertLevel.NORMAL

    def test_hypertensive_crisis_is_emergency(self, blood_pressure_template):
        result = classify(190, blood_pressure_template)
        assert result.alert_level == AlertLevel.EMERGENCY
        assert "Hypertensive crisis detected" in result.reasons
        assert ACTION_EMERGENCY in result.recommended_actions

    def test_hypertensive_crisis_overrides_any_range(self):
        for low, high in [(90, 120), (200, 300), (None, None), (0, 1000)]:
            template = _template(name="Blood Pressure", low=low, high=high)
            assert classify(185, template).alert_level == AlertLevel.EMERGENCY

    def test_blood_pressure_at_180_is_not_crisis(self):
        template = _template(name="Blood Pressure")
        assert classify(180, template).alert_level == AlertLevel.NORMAL

    def test_reasons_keep_production_order_and_duplicates(self, heart_rate_template):
        result = classify(125, heart_rate_template)
        assert result.reasons == [
            "Value significantly above normal range",
            "Tachycardia detected",
        ]
        assert result.recommended_actions == [ACTION_CONSULT, ACTION_CONSULT]

    def test_pulse_has_no_named_threshold(self):
        template = _template(name="Pulse")
        assert classify(200, template).alert_level == AlertLevel.NORMAL

    def test_explicit_code_overrides_name(self):
        template = VitalTemplate(
            name="Resting pulse", unit="bpm", normal_range=NormalRange(), code=VitalCode.HEART_RATE
        )
        assert classify(160, template).alert_level == AlertLevel.EMERGENCY


class TestVitalCodeResolution:
    """Display names resolve to codes once, at template construction."""

    @pytest.mark.parametrize("name,code", [
        ("Blood Pressure", VitalCode.BLOOD_PRESSURE),
        ("blood pressure", VitalCode.BLOOD_PRESSURE),
        ("Blood-Pressure", VitalCode.BLOOD_PRESSURE),
        ("Heart Rate", VitalCode.HEART_RATE),
        ("HR", VitalCode.HEART_RATE),
        ("Oxygen Saturation", VitalCode.OXYGEN_SATURATION),
        ("SpO2", VitalCode.OXYGEN_SATURATION),
        ("BMI", VitalCode.BMI),
        ("Pulse", VitalCode.PULSE),
        ("Mystery Metric", VitalCode.OTHER),
        ("", VitalCode.OTHER),
    ])
    def test_from_name(self, name, code):
        assert VitalCode.from_name(name) == code

    def test_template_resolves_code(self):
        assert _template(name="Heart Rate").code == VitalCode.HEART_RATE

    def test_template_to_dict(self, heart_rate_template):
        assert heart_rate_template.to_dict() == {
            "name": "Heart Rate",
            "unit": "bpm",
            "code": "heart_rate",
            "normal_range": {"min": 60, "max": 100},
        }


class TestAlertLevelOrdering:
    """Alert levels form a total order."""

    def test_rank_order(self):
        levels = [AlertLevel.NORMAL, AlertLevel.WARNING, AlertLevel.CRITICAL, AlertLevel.EMERGENCY]
        assert [level.rank for level in levels] == [0, 1, 2, 3]

    def test_escalate_never_lowers(self):
        assert AlertLevel.CRITICAL.escalate(AlertLevel.WARNING) == AlertLevel.CRITICAL
        assert AlertLevel.WARNING.escalate(AlertLevel.EMERGENCY) == AlertLevel.EMERGENCY
        assert AlertLevel.NORMAL.escalate(AlertLevel.NORMAL) == AlertLevel.NORMAL


class TestInvalidValues:
    """Non-finite values are input errors, not classifications."""

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_value_raises(self, heart_rate_template, value):
        with pytest.raises(InvalidReadingError):
            classify(value, heart_rate_template)

    def test_non_numeric_value_raises(self, heart_rate_template):
        with pytest.raises(InvalidReadingError):
            classify("fast", heart_rate_template)

    @pytest.mark.parametrize("bounds", [{"min": math.nan}, {"max": math.inf}, {"min": 60, "max": -math.inf}])
    def test_non_finite_range_bound_raises(self, bounds):
        with pytest.raises(InvalidReadingError):
            NormalRange(**bounds)

    def test_invalid_reading_is_value_error(self):
        assert issubclass(InvalidReadingError, ValueError)

    def test_result_to_dict(self, heart_rate_template):
        data = classify(155, heart_rate_template).to_dict()
        assert data["alert_level"] == "emergency"
        assert isinstance(data["reasons"], list)
        assert isinstance(data["recommended_actions"], list)
