"""SQL access for vital templates, readings and alerts."""
import json
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Optional

from vital_alerts import AlertResult, NormalRange, VitalCode, VitalTemplate


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing Z is accepted."""
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def to_utc_iso(moment: datetime) -> str:
    """Stored form of a timestamp; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


def row_to_template(row) -> VitalTemplate:
    """Convert a vital_types row to the classifier's template."""
    return VitalTemplate(
        name=row["name"],
        unit=row["unit"],
        normal_range=NormalRange(
            min=row["normal_range_min"],
            max=row["normal_range_max"],
        ),
    )


def row_to_vital_type(row) -> dict:
    return {
        "id": row["id"],
        "name": row["name"],
        "code": VitalCode.from_name(row["name"]).value,
        "unit": row["unit"],
        "normal_range_min": row["normal_range_min"],
        "normal_range_max": row["normal_range_max"],
        "description": row["description"],
    }


def row_to_reading(row) -> dict:
    return {
        "id": row["id"],
        "patient_id": row["patient_id"],
        "vital_type_id": row["vital_type_id"],
        "vital_name": row["vital_name"],
        "value": row["value"],
        "unit": row["unit"],
        "notes": row["notes"],
        "alert_level": row["alert_level"],
        "alert_reasons": json.loads(row["alert_reasons"] or "[]"),
        "is_flagged": bool(row["is_flagged"]),
        "reading_time": row["reading_time"],
        "created_at": row["created_at"],
    }


def row_to_alert(row) -> dict:
    return {
        "id": row["id"],
        "patient_id": row["patient_id"],
        "reading_id": row["reading_id"],
        "vital_name": row["vital_name"],
        "value": row["value"],
        "level": row["alert_level"],
        "reasons": json.loads(row["reasons"]),
        "recommended_actions": json.loads(row["recommended_actions"]),
        "acknowledged": bool(row["acknowledged"]),
        "timestamp": row["created_at"],
    }


# ---------------------------------------------------------------------------
# Vital types
# ---------------------------------------------------------------------------


def list_vital_types(conn: sqlite3.Connection) -> list:
    return conn.execute("SELECT * FROM vital_types ORDER BY name").fetchall()


def get_vital_type(conn: sqlite3.Connection, vital_type_id: str) -> Optional[sqlite3.Row]:
    return conn.execute(
        "SELECT * FROM vital_types WHERE id = ?", (vital_type_id,)
    ).fetchone()


def find_vital_type_by_name(conn: sqlite3.Connection, name: str) -> Optional[sqlite3.Row]:
    return conn.execute(
        "SELECT * FROM vital_types WHERE name = ?", (name,)
    ).fetchone()


def insert_vital_type(
    conn: sqlite3.Connection,
    name: str,
    unit: str,
    normal_range_min: Optional[float] = None,
    normal_range_max: Optional[float] = None,
    description: Optional[str] = None,
) -> str:
    vital_type_id = str(uuid.uuid4())
    conn.execute(
        """
        INSERT INTO vital_types
            (id, name, unit, normal_range_min, normal_range_max, description, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (vital_type_id, name, unit, normal_range_min, normal_range_max, description, utc_now()),
    )
    return vital_type_id


# ---------------------------------------------------------------------------
# Readings
# ---------------------------------------------------------------------------

_READING_SELECT = """
    SELECT r.*, t.name AS vital_name
    FROM vital_readings r
    JOIN vital_types t ON t.id = r.vital_type_id
"""


def insert_reading(
    conn: sqlite3.Connection,
    patient_id: str,
    vital_type_id: str,
    value: float,
    unit: str,
    result: AlertResult,
    reading_time: str,
    notes: Optional[str] = None,
) -> str:
    reading_id = str(uuid.uuid4())
    conn.execute(
        """
        INSERT INTO vital_readings
            (id, patient_id, vital_type_id, value, unit, notes,
             alert_level, alert_reasons, is_flagged, reading_time, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            reading_id,
            patient_id,
            vital_type_id,
            value,
            unit,
            notes,
            result.alert_level.value,
            json.dumps(result.reasons),
            0 if result.is_normal else 1,
            reading_time,
            utc_now(),
        ),
    )
    return reading_id


def get_reading(conn: sqlite3.Connection, reading_id: str) -> Optional[sqlite3.Row]:
    return conn.execute(_READING_SELECT + " WHERE r.id = ?", (reading_id,)).fetchone()


def query_readings(
    conn: sqlite3.Connection,
    patient_id: Optional[str] = None,
    vital_type_id: Optional[str] = None,
    alert_level: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    limit: int = 100,
) -> list:
    query = _READING_SELECT + " WHERE 1=1"
    params = []

    if patient_id:
        query += " AND r.patient_id = ?"
        params.append(patient_id)

    if vital_type_id:
        query += " AND r.vital_type_id = ?"
        params.append(vital_type_id)

    if alert_level:
        query += " AND r.alert_level = ?"
        params.append(alert_level)

    if start_date:
        query += " AND r.reading_time >= ?"
        params.append(start_date)

    if end_date:
        query += " AND r.reading_time <= ?"
        params.append(end_date)

    query += " ORDER BY r.reading_time DESC LIMIT ?"
    params.append(limit)

    return conn.execute(query, params).fetchall()


def reading_history(
    conn: sqlite3.Connection,
    patient_id: str,
    vital_type_id: str,
    since: str,
    until: str,
    exclude_id: Optional[str] = None,
) -> list:
    """(value, timestamp) pairs between since and until inclusive, oldest first."""
    rows = conn.execute(
        """
        SELECT id, value, reading_time FROM vital_readings
        WHERE patient_id = ? AND vital_type_id = ?
          AND reading_time >= ? AND reading_time <= ?
        ORDER BY reading_time
        """,
        (patient_id, vital_type_id, since, until),
    ).fetchall()
    return [
        (row["value"], parse_timestamp(row["reading_time"]))
        for row in rows
        if row["id"] != exclude_id
    ]


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


def insert_alert(
    conn: sqlite3.Connection,
    patient_id: str,
    vital_name: str,
    result: AlertResult,
    value: Optional[float] = None,
    reading_id: Optional[str] = None,
) -> str:
    alert_id = str(uuid.uuid4())
    conn.execute(
        """
        INSERT INTO vital_alerts
            (id, patient_id, reading_id, vital_name, value, alert_level,
             reasons, recommended_actions, acknowledged, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?)
        """,
        (
            alert_id,
            patient_id,
            reading_id,
            vital_name,
            value,
            result.alert_level.value,
            json.dumps(result.reasons),
            json.dumps(result.recommended_actions),
            utc_now(),
        ),
    )
    return alert_id


def get_alert(conn: sqlite3.Connection, alert_id: str) -> Optional[sqlite3.Row]:
    return conn.execute("SELECT * FROM vital_alerts WHERE id = ?", (alert_id,)).fetchone()


def query_alerts(
    conn: sqlite3.Connection,
    patient_id: Optional[str] = None,
    level: Optional[str] = None,
    acknowledged: Optional[bool] = None,
    limit: int = 100,
) -> list:
    query = "SELECT * FROM vital_alerts WHERE 1=1"
    params = []

    if patient_id:
        query += " AND patient_id = ?"
        params.append(patient_id)

    if level:
        query += " AND alert_level = ?"
        params.append(level)

    if acknowledged is not None:
        query += " AND acknowledged = ?"
        params.append(1 if acknowledged else 0)

    query += " ORDER BY created_at DESC LIMIT ?"
    params.append(limit)

    return conn.execute(query, params).fetchall()


def acknowledge_alert(conn: sqlite3.Connection, alert_id: str) -> bool:
    cursor = conn.execute(
        "UPDATE vital_alerts SET acknowledged = 1 WHERE id = ?", (alert_id,)
    )
    return cursor.rowcount > 0
