"""Thread-safe in-memory queue for vital alert notifications.

Non-normal readings are published here after their alert record is stored,
and connected clients receive them via SSE.
"""
import asyncio
import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, AsyncIterator

from vital_alerts import AlertLevel, AlertResult

from ..config import get_settings

log = logging.getLogger(__name__)


@dataclass
class VitalNotification:
    """Real-time notification for a non-normal vital reading."""

    patient_id: str
    vital_name: str
    level: AlertLevel
    title: str
    message: str
    reasons: list = field(default_factory=list)
    recommended_actions: list = field(default_factory=list)
    value: Optional[float] = None
    unit: Optional[str] = None
    alert_id: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "id": self.id,
            "patient_id": self.patient_id,
            "vital_name": self.vital_name,
            "level": self.level.value,
            "title": self.title,
            "message": self.message,
            "reasons": list(self.reasons),
            "recommended_actions": list(self.recommended_actions),
            "timestamp": self.timestamp.isoformat(),
        }

        if self.value is not None:
            result["value"] = self.value
        if self.unit:
            result["unit"] = self.unit
        if self.alert_id:
            result["alert_id"] = self.alert_id

        return result


class AlertQueue:
    """Thread-safe in-memory queue for vital alert notifications.

    Supports multiple SSE subscribers and maintains a history buffer
    for new connections to catch up on recent alerts.
    """

    def __init__(self, max_history: int = 100, subscriber_buffer: int = 100):
        """Initialize the alert queue.

        Args:
            max_history: Maximum number of notifications kept in history.
            subscriber_buffer: Per-subscriber queue size before it is dropped.
        """
        self._history: deque[VitalNotification] = deque(maxlen=max_history)
        self._subscribers: list[asyncio.Queue] = []
        self._subscriber_buffer = subscriber_buffer
        self._lock = threading.Lock()
        self._stats = {
            "total_published": 0,
            "total_subscribers": 0,
            "dropped_subscribers": 0,
            "alerts_by_level": {},
        }

    def publish(self, notification: VitalNotification) -> None:
        """Publish a notification to all subscribers.

        Thread-safe method that can be called from any thread.
        """
        with self._lock:
            self._history.append(notification)

            self._stats["total_published"] += 1
            level = notification.level.value
            self._stats["alerts_by_level"][level] = \
                self._stats["alerts_by_level"].get(level, 0) + 1

            dead_subscribers = []
            for queue in self._subscribers:
                try:
                    queue.put_nowait(notification)
                except asyncio.QueueFull:
                    dead_subscribers.append(queue)

            for queue in dead_subscribers:
                self._subscribers.remove(queue)
                self._stats["dropped_subscribers"] += 1

        if dead_subscribers:
            log.warning(f"[ALERTS] Dropped {len(dead_subscribers)} slow subscriber(s)")

    def _register(self, include_history: bool, history_count: int) -> asyncio.Queue:
        queue: asyncio.Queue[VitalNotification] = asyncio.Queue(maxsize=self._subscriber_buffer)

        with self._lock:
            self._subscribers.append(queue)
            self._stats["total_subscribers"] += 1

            if include_history and history_count > 0:
                recent = list(self._history)[-history_count:]
                for notification in recent[-self._subscriber_buffer:]:
                    queue.put_nowait(notification)

        return queue

    def _unregister(self, queue: asyncio.Queue) -> None:
        with self._lock:
            if queue in self._subscribers:
                self._subscribers.remove(queue)

    async def subscribe(
        self,
        include_history: bool = True,
        history_count: int = 10
    ) -> AsyncIterator[VitalNotification]:
        """Subscribe to notifications via async generator.

        Args:
            include_history: Whether to yield recent notifications first.
            history_count: Number of recent notifications to replay.

        Yields:
            VitalNotification objects as they arrive.
        """
        queue = self._register(include_history, history_count)
        try:
            while True:
                notification = await queue.get()
                yield notification
        finally:
            self._unregister(queue)

    def get_history(self, count: int = 50) -> list[VitalNotification]:
        """Get recent notifications, newest first."""
        with self._lock:
            return list(self._history)[-count:][::-1]

    def get_stats(self) -> dict:
        """Get queue statistics."""
        with self._lock:
            return {
                **self._stats,
                "alerts_by_level": dict(self._stats["alerts_by_level"]),
                "current_subscribers": len(self._subscribers),
                "history_size": len(self._history),
            }

    def clear_history(self) -> None:
        """Clear the notification history buffer."""
        with self._lock:
            self._history.clear()


# Global singleton instance
alert_queue = AlertQueue(max_history=get_settings().notification_history)


def publish_vital_alert(
    patient_id: str,
    vital_name: str,
    result: AlertResult,
    value: Optional[float] = None,
    unit: Optional[str] = None,
    alert_id: Optional[str] = None,
) -> Optional[VitalNotification]:
    """Publish a notification for a classified reading.

    Normal results are not published.

    Returns:
        The published VitalNotification, or None for a normal result
    """
    if result.is_normal:
        return None

    reading = f"{value:g} {unit or ''}".strip() if value is not None else "panel"
    notification = VitalNotification(
        patient_id=patient_id,
        vital_name=vital_name,
        level=result.alert_level,
        title=f"{result.alert_level.value.title()} Alert: {vital_name}",
        message=f"{vital_name} {reading}: {'; '.join(result.reasons)}",
        reasons=list(result.reasons),
        recommended_actions=list(result.recommended_actions),
        value=value,
        unit=unit,
        alert_id=alert_id,
    )
    alert_queue.publish(notification)
    log.info(f"[ALERTS] Published {notification.level.value} alert for patient {patient_id}")
    return notification
