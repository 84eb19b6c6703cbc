#!/usr/bin/env python3
"""
Seed the vitals database with the standard vital types.

Creates the schema if needed and inserts each standard template,
skipping names that already exist.

Usage:
    python scripts/seed_vital_types.py [--db PATH]
"""
import argparse
import sys
from pathlib import Path

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent
for path in (BASE_DIR, BASE_DIR / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from server.vitals_api.database import DatabaseManager, db_manager  # noqa: E402
from server.vitals_api.services import repository  # noqa: E402


STANDARD_VITAL_TYPES = [
    {"name": "Blood Pressure", "unit": "mmHg", "min": 90, "max": 140,
     "description": "Systolic blood pressure measurement"},
    {"name": "Heart Rate", "unit": "bpm", "min": 60, "max": 100,
     "description": "Resting heart rate"},
    {"name": "Body Temperature", "unit": "°F", "min": 97.0, "max": 99.0,
     "description": "Body temperature in Fahrenheit"},
    {"name": "Weight", "unit": "lbs", "min": None, "max": None,
     "description": "Body weight in pounds"},
    {"name": "Blood Glucose", "unit": "mg/dL", "min": 70, "max": 140,
     "description": "Blood glucose level"},
    {"name": "Oxygen Saturation", "unit": "%", "min": 95, "max": 100,
     "description": "Blood oxygen saturation level (SpO2)"},
    {"name": "Respiratory Rate", "unit": "breaths/min", "min": 12, "max": 20,
     "description": "Number of breaths per minute"},
    {"name": "Height", "unit": "inches", "min": None, "max": None,
     "description": "Height in inches"},
    {"name": "BMI", "unit": "kg/m²", "min": 18.5, "max": 24.9,
     "description": "Body Mass Index"},
    {"name": "Pulse", "unit": "bpm", "min": 60, "max": 100,
     "description": "Pulse rate"},
]


def seed_vital_types(manager: DatabaseManager) -> tuple[int, int]:
    """
    Insert missing standard vital types.

    Returns:
        (created, skipped) counts
    """
    manager.init_schema()
    created = 0
    skipped = 0

    with manager.get_conn() as conn:
        for vital in STANDARD_VITAL_TYPES:
            if repository.find_vital_type_by_name(conn, vital["name"]) is not None:
                print(f"  Skipped: {vital['name']} (already exists)")
                skipped += 1
                continue

            repository.insert_vital_type(
                conn,
                name=vital["name"],
                unit=vital["unit"],
                normal_range_min=vital["min"],
                normal_range_max=vital["max"],
                description=vital["description"],
            )
            print(f"  Created: {vital['name']} ({vital['unit']})")
            created += 1

    return created, skipped


def main():
    """Seed the standard vital types."""
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--db", help="Database file (defaults to the configured path)")
    args = parser.parse_args()

    manager = db_manager
    if args.db:
        manager = DatabaseManager()
        manager.db_path = args.db

    print("=" * 60)
    print("Vital Types Seeding Script")
    print("=" * 60)
    print(f"\nDatabase: {manager.db_path}\n")

    created, skipped = seed_vital_types(manager)

    print()
    print("=" * 60)
    print(f"Complete! Created: {created}, Skipped: {skipped}")
    print("=" * 60)

    with manager.get_conn() as conn:
        for row in repository.list_vital_types(conn):
            low = row["normal_range_min"] if row["normal_range_min"] is not None else "N/A"
            high = row["normal_range_max"] if row["normal_range_max"] is not None else "N/A"
            print(f"  {row['name']}: {low} - {high} {row['unit']}")


if __name__ == "__main__":
    main()
