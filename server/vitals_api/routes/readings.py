"""Vital reading API routes.

Recording a reading classifies it, compares it with the patient's recent
history, stores it, and raises an alert when the level is not normal.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query

from vital_alerts import (
    InvalidReadingError,
    TrendResult,
    VitalSignsPanel,
    assess_panel,
    classify,
    compute_trend,
)

from ..config import get_settings
from ..database import db_manager
from ..models.vital import (
    AlertAssessment,
    AlertLevelName,
    PanelCreate,
    PanelResponse,
    PatientTrend,
    ReadingCreate,
    ReadingResponse,
    TrendSummary,
    VitalReading,
)
from ..services import repository
from ..services.alert_queue import publish_vital_alert

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/vitals", tags=["Vital Readings"])

PANEL_VITAL_NAME = "Vital Signs Panel"


def _trend_summary(result: TrendResult, window_days: int) -> TrendSummary:
    return TrendSummary(**result.to_dict(), window_days=window_days)


def _window_days(mode: str) -> int:
    settings = get_settings()
    return settings.long_trend_window_days if mode == "long" else settings.trend_window_days


@router.post("/readings", response_model=ReadingResponse, status_code=201)
async def record_reading(body: ReadingCreate):
    """
    Record a vital reading for a patient.

    The reading is classified against its vital type's normal range and
    compared with the patient's readings of the same type over the short
    trend window. Non-normal readings also create an alert record and a
    live notification.
    """
    try:
        moment = (
            repository.parse_timestamp(body.reading_time)
            if body.reading_time
            else datetime.now(timezone.utc)
        )
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid reading_time: {body.reading_time}")
    moment = moment.astimezone(timezone.utc)
    window_days = _window_days("short")

    with db_manager.get_conn() as conn:
        type_row = repository.get_vital_type(conn, body.vital_type_id)
        if type_row is None:
            raise HTTPException(status_code=404, detail=f"Vital type {body.vital_type_id} not found")

        template = repository.row_to_template(type_row)
        try:
            result = classify(body.value, template)
        except InvalidReadingError as e:
            raise HTTPException(status_code=422, detail=str(e))

        history = repository.reading_history(
            conn,
            body.patient_id,
            body.vital_type_id,
            since=repository.to_utc_iso(moment - timedelta(days=window_days)),
            until=repository.to_utc_iso(moment),
        )
        trend = compute_trend(body.value, history, window_days=window_days, now=moment)

        unit = body.unit or template.unit
        reading_id = repository.insert_reading(
            conn,
            patient_id=body.patient_id,
            vital_type_id=body.vital_type_id,
            value=body.value,
            unit=unit,
            result=result,
            reading_time=repository.to_utc_iso(moment),
            notes=body.notes,
        )

        alert_id = None
        if not result.is_normal:
            alert_id = repository.insert_alert(
                conn,
                patient_id=body.patient_id,
                vital_name=template.name,
                result=result,
                value=body.value,
                reading_id=reading_id,
            )

        reading_row = repository.get_reading(conn, reading_id)

    if alert_id:
        publish_vital_alert(
            body.patient_id, template.name, result, value=body.value, unit=unit, alert_id=alert_id
        )

    log.info(
        f"[VITALS] Recorded {template.name}={body.value} {unit} for patient "
        f"{body.patient_id}: {result.alert_level.value}, trend {trend.trend.value}"
    )
    return ReadingResponse(
        reading=VitalReading(**repository.row_to_reading(reading_row)),
        alert=AlertAssessment(**result.to_dict()),
        trend=_trend_summary(trend, window_days),
        alert_id=alert_id,
    )


@router.post("/readings/panel", response_model=PanelResponse, status_code=201)
async def record_panel(body: PanelCreate):
    """
    Assess a composite vital-signs panel.
    The panel itself is not stored; a non-normal result is stored as an alert.
    """
    panel = VitalSignsPanel(**body.model_dump(exclude={"patient_id"}))
    try:
        result = assess_panel(panel)
    except InvalidReadingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    alert_id = None
    if not result.is_normal:
        with db_manager.get_conn() as conn:
            alert_id = repository.insert_alert(
                conn,
                patient_id=body.patient_id,
                vital_name=PANEL_VITAL_NAME,
                result=result,
            )
        publish_vital_alert(body.patient_id, PANEL_VITAL_NAME, result, alert_id=alert_id)

    return PanelResponse(alert=AlertAssessment(**result.to_dict()), alert_id=alert_id)


@router.get("/readings", response_model=list[VitalReading])
async def get_readings(
    patient_id: Optional[str] = Query(default=None, description="Filter by patient"),
    vital_type_id: Optional[str] = Query(default=None, description="Filter by vital type"),
    alert_level: Optional[AlertLevelName] = Query(default=None, description="Filter by alert level"),
    start_date: Optional[datetime] = Query(default=None, description="Earliest reading time (ISO-8601)"),
    end_date: Optional[datetime] = Query(default=None, description="Latest reading time (ISO-8601)"),
    limit: int = Query(default=100, ge=1, le=200),
):
    """
    Get vital readings, newest first.
    Date bounds may carry any UTC offset; naive values are taken as UTC.
    """
    with db_manager.get_conn() as conn:
        rows = repository.query_readings(
            conn,
            patient_id=patient_id,
            vital_type_id=vital_type_id,
            alert_level=alert_level,
            start_date=repository.to_utc_iso(start_date) if start_date else None,
            end_date=repository.to_utc_iso(end_date) if end_date else None,
            limit=limit,
        )
    return [VitalReading(**repository.row_to_reading(row)) for row in rows]


@router.get("/patients/{patient_id}/trend", response_model=PatientTrend)
async def get_patient_trend(
    patient_id: str,
    vital_type_id: str = Query(..., description="Vital type to analyze"),
    mode: Literal["short", "long"] = Query(default="short", description="7-day or 30-day window"),
):
    """
    Trend of the patient's latest reading against earlier readings.
    Uses the short (7-day) or long (30-day) window.
    """
    window_days = _window_days(mode)
    now = datetime.now(timezone.utc)

    with db_manager.get_conn() as conn:
        latest = repository.query_readings(
            conn, patient_id=patient_id, vital_type_id=vital_type_id, limit=1
        )
        if not latest:
            raise HTTPException(
                status_code=404,
                detail=f"No readings of vital type {vital_type_id} for patient {patient_id}",
            )
        current = latest[0]
        history = repository.reading_history(
            conn,
            patient_id,
            vital_type_id,
            since=repository.to_utc_iso(now - timedelta(days=window_days)),
            until=repository.to_utc_iso(now),
            exclude_id=current["id"],
        )

    trend = compute_trend(current["value"], history, window_days=window_days, now=now)
    return PatientTrend(
        patient_id=patient_id,
        vital_type_id=vital_type_id,
        vital_name=current["vital_name"],
        current_value=current["value"],
        reading_time=current["reading_time"],
        trend=_trend_summary(trend, window_days),
    )
