"""
Test fixtures for workout-import-api.

Provides a TestClient wired to a fresh in-memory record store plus sample
file contents for each supported format.
"""

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Repo root: .../workout-import-api
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import workout_import_api...`
p_str = str(SRC)
if p_str not in sys.path:
    sys.path.insert(0, p_str)

from workout_import_api.main import app
from workout_import_api.api.import_routes import get_import_service
from workout_import_api.services.import_service import ImportService
from workout_import_api.services.record_store import InMemoryRecordStore


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    """Empty record store for one test."""
    return InMemoryRecordStore()


@pytest.fixture
def client(record_store):
    """Per-test FastAPI TestClient backed by a fresh record store."""
    service = ImportService(record_store)
    app.dependency_overrides[get_import_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.pop(get_import_service, None)


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def exercise_csv() -> str:
    """Exercise CSV with quoted muscle groups and extra columns."""
    return (
        "name,category,muscleGroup,equipment,difficulty,instructions,notes\n"
        'Push-ups,strength,"chest,triceps",bodyweight,beginner,"Do push-ups","Keep form strict"\n'
    )


@pytest.fixture
def workout_csv() -> str:
    """Workout CSV: one row per set, two exercises in one workout."""
    return (
        "Workout,Date,Exercise,Set,Reps,Weight,Notes\n"
        "Push Day,2024-01-15,Bench Press,1,10,60,Felt strong\n"
        "Push Day,2024-01-15,Bench Press,2,8,65,\n"
        "Push Day,2024-01-15,Overhead Press,1,8,40,\n"
    )


@pytest.fixture
def exercise_xml() -> str:
    """Exercise XML with a container element."""
    return """
    <exercises>
      <exercise>
        <name>Push-ups</name>
        <category>Strength</category>
        <muscleGroup>Chest,Triceps</muscleGroup>
        <notes>Keep form strict</notes>
      </exercise>
    </exercises>
    """.strip()


@pytest.fixture
def workout_json() -> str:
    """Workout JSON using the canonical shape."""
    return json.dumps([
        {
            "name": "Leg Day",
            "date": "2024-02-01",
            "exercises": [
                {
                    "exerciseName": "Squat",
                    "order": 0,
                    "sets": [
                        {"setNumber": 1, "reps": 5, "weight": 100},
                        {"setNumber": 2, "reps": 5, "weight": 105},
                    ],
                }
            ],
        }
    ])
