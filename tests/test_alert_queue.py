"""
Unit tests for the vital alert notification queue.

Usage:
    pytest tests/test_alert_queue.py -v
"""
import asyncio
import pytest

from vital_alerts import AlertLevel, AlertResult

from server.vitals_api.services.alert_queue import (
    AlertQueue,
    VitalNotification,
    alert_queue,
    publish_vital_alert,
)


def _notification(level=AlertLevel.WARNING, patient_id="patient-1") -> VitalNotification:
    return VitalNotification(
        patient_id=patient_id,
        vital_name="Heart Rate",
        level=level,
        title="Test",
        message="Test notification",
    )


class TestAlertQueue:
    """Publishing, history and statistics."""

    def test_history_is_newest_first(self):
        queue = AlertQueue()
        first, second = _notification(), _notification()
        queue.publish(first)
        queue.publish(second)
        assert queue.get_history() == [second, first]

    def test_history_is_bounded(self):
        queue = AlertQueue(max_history=3)
        for _ in range(5):
            queue.publish(_notification())
        assert len(queue.get_history()) == 3

    def test_stats_count_levels(self):
        queue = AlertQueue()
        queue.publish(_notification(AlertLevel.WARNING))
        queue.publish(_notification(AlertLevel.EMERGENCY))
        queue.publish(_notification(AlertLevel.EMERGENCY))
        stats = queue.get_stats()
        assert stats["total_published"] == 3
        assert stats["alerts_by_level"] == {"warning": 1, "emergency": 2}
        assert stats["history_size"] == 3
        assert stats["current_subscribers"] == 0

    def test_clear_history(self):
        queue = AlertQueue()
        queue.publish(_notification())
        queue.clear_history()
        assert queue.get_history() == []

    def test_full_subscriber_is_dropped(self):
        queue = AlertQueue(subscriber_buffer=1)
        queue._register(include_history=False, history_count=0)
        queue.publish(_notification())
        queue.publish(_notification())
        stats = queue.get_stats()
        assert stats["current_subscribers"] == 0
        assert stats["dropped_subscribers"] == 1

    @pytest.mark.asyncio
    async def test_subscribe_replays_history_then_streams(self):
        queue = AlertQueue()
        old = _notification(patient_id="old")
        queue.publish(old)

        stream = queue.subscribe(include_history=True, history_count=5)
        assert await asyncio.wait_for(stream.__anext__(), timeout=1) is old

        live = _notification(patient_id="live")
        queue.publish(live)
        assert await asyncio.wait_for(stream.__anext__(), timeout=1) is live
        assert queue.get_stats()["current_subscribers"] == 1

        await stream.aclose()
        assert queue.get_stats()["current_subscribers"] == 0


class TestNotificationFormatting:
    """Notification payloads."""

    def test_to_dict_includes_optional_fields(self):
        notification = VitalNotification(
            patient_id="p1",
            vital_name="Heart Rate",
            level=AlertLevel.CRITICAL,
            title="Critical Alert: Heart Rate",
            message="Heart Rate 125 bpm: Tachycardia detected",
            value=125,
            unit="bpm",
            alert_id="alert-1",
        )
        data = notification.to_dict()
        assert data["level"] == "critical"
        assert data["value"] == 125
        assert data["unit"] == "bpm"
        assert data["alert_id"] == "alert-1"
        assert "timestamp" in data

    def test_to_dict_omits_missing_fields(self):
        data = _notification().to_dict()
        assert "value" not in data
        assert "unit" not in data
        assert "alert_id" not in data


class TestPublishVitalAlert:
    """Convenience publisher used by the reading routes."""

    def setup_method(self):
        alert_queue.clear_history()

    def teardown_method(self):
        alert_queue.clear_history()

    def test_normal_result_is_not_published(self):
        assert publish_vital_alert("p1", "Heart Rate", AlertResult(), value=72, unit="bpm") is None
        assert alert_queue.get_history() == []

    def test_non_normal_result_is_published(self):
        result = AlertResult()
        result.raise_to(AlertLevel.CRITICAL, "Tachycardia detected", "Seek immediate medical consultation")

        notification = publish_vital_alert("p1", "Heart Rate", result, value=125, unit="bpm")

        assert notification is not None
        assert notification.level == AlertLevel.CRITICAL
        assert notification.title == "Critical Alert: Heart Rate"
        assert notification.message == "Heart Rate 125 bpm: Tachycardia detected"
        assert alert_queue.get_history()[0] is notification
