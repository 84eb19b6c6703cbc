"""
Pytest fixtures for Vital Alerts tests.
"""
import sys
import pytest
from datetime import datetime, timezone
from pathlib import Path
from dotenv import load_dotenv

# Ensure src/ and the project root are on sys.path so tests can import
# vital_alerts and the server package without an install.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for path in (ROOT, SRC):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Load environment variables
load_dotenv()

from vital_alerts import NormalRange, VitalTemplate  # noqa: E402


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def now():
    """Fixed reference time for trend calculations."""
    return datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def heart_rate_template():
    return VitalTemplate(name="Heart Rate", unit="bpm", normal_range=NormalRange(60, 100))


@pytest.fixture
def blood_pressure_template():
    return VitalTemplate(name="Blood Pressure", unit="mmHg", normal_range=NormalRange(90, 120))


@pytest.fixture
def glucose_template():
    return VitalTemplate(name="Blood Glucose", unit="mg/dL", normal_range=NormalRange(70, 140))


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def vitals_db(tmp_path):
    """Point the shared database manager at a fresh temporary database."""
    from server.vitals_api.database import db_manager

    original = db_manager.db_path
    db_manager.db_path = str(tmp_path / "vitals.db")
    db_manager.init_schema()
    yield db_manager
    db_manager.db_path = original


@pytest.fixture
def client(vitals_db):
    """FastAPI test client backed by the temporary database."""
    from fastapi.testclient import TestClient
    from server.vitals_api.main import app
    from server.vitals_api.services.alert_queue import alert_queue

    alert_queue.clear_history()
    with TestClient(app) as test_client:
        yield test_client
    alert_queue.clear_history()


@pytest.fixture
def create_vital_type(client):
    """Factory fixture that creates a vital type and returns its JSON."""

    def _create(name: str, unit: str, low=None, high=None) -> dict:
        response = client.post(
            "/api/vitals/types",
            json={
                "name": name,
                "unit": unit,
                "normal_range_min": low,
                "normal_range_max": high,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
