"""Vital alert API routes.

Stored alerts are queried from the database; live notifications are
streamed via SSE.
"""
import json
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse

from ..database import db_manager
from ..models.alerts import VitalAlert
from ..models.vital import AlertLevelName
from ..services import repository
from ..services.alert_queue import alert_queue

router = APIRouter(prefix="/api/vitals", tags=["Alerts"])


@router.get("/alerts", response_model=list[VitalAlert])
async def get_alerts(
    patient_id: Optional[str] = Query(default=None, description="Filter by patient"),
    level: Optional[AlertLevelName] = Query(default=None, description="Filter by alert level"),
    acknowledged: Optional[bool] = Query(default=None, description="Filter by acknowledgement"),
    limit: int = Query(default=100, ge=1, le=200),
):
    """Get stored vital alerts, newest first."""
    with db_manager.get_conn() as conn:
        rows = repository.query_alerts(
            conn,
            patient_id=patient_id,
            level=level,
            acknowledged=acknowledged,
            limit=limit,
        )
    return [VitalAlert(**repository.row_to_alert(row)) for row in rows]


@router.post("/alerts/{alert_id}/acknowledge", response_model=VitalAlert)
async def acknowledge_alert(alert_id: str):
    """Mark an alert as acknowledged."""
    with db_manager.get_conn() as conn:
        if not repository.acknowledge_alert(conn, alert_id):
            raise HTTPException(status_code=404, detail=f"Alert {alert_id} not found")
        row = repository.get_alert(conn, alert_id)
    return VitalAlert(**repository.row_to_alert(row))


# ============================================================================
# Live Notifications (SSE)
# ============================================================================


@router.get("/alerts/stream")
async def stream_alerts(
    include_history: bool = Query(True, description="Include recent alerts on connect"),
    history_count: int = Query(10, ge=0, le=50, description="Number of historical alerts")
):
    """
    Stream vital alert notifications via Server-Sent Events (SSE).

    The stream never closes - clients should handle reconnection.

    Usage with curl:
        curl -N http://localhost:8083/api/vitals/alerts/stream
    """
    async def event_generator():
        async for notification in alert_queue.subscribe(
            include_history=include_history,
            history_count=history_count
        ):
            data = json.dumps(notification.to_dict())
            yield f"event: alert\ndata: {data}\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        }
    )


@router.get("/alerts/notifications/history")
async def get_notification_history(
    count: int = Query(50, ge=1, le=100, description="Number of notifications to return")
):
    """Recent live notifications, newest first."""
    return [notification.to_dict() for notification in alert_queue.get_history(count)]


@router.get("/alerts/notifications/stats")
async def get_notification_stats():
    """Counts of published notifications by level and current subscribers."""
    return alert_queue.get_stats()
