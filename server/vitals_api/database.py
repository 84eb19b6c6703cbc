"""SQLite connection manager for vital templates, readings and alerts."""
import sqlite3
from contextlib import contextmanager
from typing import Generator
import logging

from .config import get_settings

log = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS vital_types (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    unit TEXT NOT NULL,
    normal_range_min REAL,
    normal_range_max REAL,
    description TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS vital_readings (
    id TEXT PRIMARY KEY,
    patient_id TEXT NOT NULL,
    vital_type_id TEXT NOT NULL REFERENCES vital_types(id),
    value REAL NOT NULL,
    unit TEXT NOT NULL,
    notes TEXT,
    alert_level TEXT NOT NULL DEFAULT 'normal',
    alert_reasons TEXT NOT NULL DEFAULT '[]',
    is_flagged INTEGER NOT NULL DEFAULT 0,
    reading_time TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_readings_patient_type_time
    ON vital_readings (patient_id, vital_type_id, reading_time);

CREATE TABLE IF NOT EXISTS vital_alerts (
    id TEXT PRIMARY KEY,
    patient_id TEXT NOT NULL,
    reading_id TEXT REFERENCES vital_readings(id),
    vital_name TEXT NOT NULL,
    value REAL,
    alert_level TEXT NOT NULL,
    reasons TEXT NOT NULL,
    recommended_actions TEXT NOT NULL,
    acknowledged INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_alerts_patient ON vital_alerts (patient_id, created_at);
"""


class DatabaseManager:
    """
    SQLite database manager for the vitals service.
    Opens a fresh connection per use; the connection commits when the
    block exits cleanly and rolls back otherwise.
    """

    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self.db_path = self.settings.vitals_db_path

    @contextmanager
    def get_conn(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a read-write connection to the vitals database."""
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row  # Enable dict-like row access
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        with self.get_conn() as conn:
            conn.executescript(SCHEMA)
        log.info(f"[VITALS] Schema ready at {self.db_path}")


# Singleton instance
db_manager = DatabaseManager()
