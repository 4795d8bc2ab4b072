"""Pytest configuration and shared fixtures."""
import os

os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from app.domain.student import StudentRecord


def make_record(student_id: str, name: str, **overrides) -> StudentRecord:
    """Build a StudentRecord with neutral defaults for unspecified fields."""
    data = {
        "student_id": student_id,
        "name": name,
        "class": "4B",
        "persona": "Steady Achiever",
        "comprehension": 50,
        "attention": 50,
        "focus": 50,
        "retention": 50,
        "assessment_score": 50,
    }
    data.update(overrides)
    return StudentRecord.model_validate(data)


@pytest.fixture
def ann_and_bob():
    """Two-student roster used by the worked examples."""
    return (
        make_record(
            "S1", "Ann",
            persona="High Performer",
            comprehension=80, attention=70, focus=60, retention=90, assessment_score=75,
        ),
        make_record(
            "S2", "Bob",
            persona="Struggling Learner",
            comprehension=60, attention=50, focus=70, retention=80, assessment_score=65,
        ),
    )


@pytest.fixture
def roster():
    """Larger roster with accents, mixed case and tied scores."""
    return (
        make_record("S1", "Alice", persona="High Performer", **{"class": "4A"}, comprehension=90, assessment_score=88),
        make_record("S2", "bob", persona="Struggling Learner", comprehension=55, assessment_score=60),
        make_record("S3", "Émile", persona="Steady Achiever", comprehension=70, assessment_score=60),
        make_record("S4", "Carl", persona="Distracted Thinker", comprehension=70, assessment_score=72),
        make_record("S5", "Eli", persona="High Performer", comprehension=85, assessment_score=60),
    )


@pytest.fixture
def students_json(tmp_path):
    """Write a roster file and return its path."""
    import json

    path = tmp_path / "students_with_personas.json"
    path.write_text(json.dumps([
        {"student_id": "S1", "name": "Ann", "class": "4B", "comprehension": 80, "attention": 70,
         "focus": 60, "retention": 90, "assessment_score": 75, "persona": "High Performer"},
        {"student_id": "S2", "name": "Bob", "class": "4B", "comprehension": 60, "attention": 50,
         "focus": 70, "retention": 80, "assessment_score": 65, "persona": "Struggling Learner"},
    ]), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clear_record_cache():
    """Reset the cached roster between tests."""
    from app.infrastructure.data_loader import load_records

    load_records.cache_clear()
    yield
    load_records.cache_clear()


@pytest.fixture
def test_client(ann_and_bob):
    """FastAPI test client serving the Ann/Bob roster."""
    from main import app
    from app.api.routes import get_records, get_registry
    from app.services.sessions import SessionRegistry

    registry = SessionRegistry(lambda: ann_and_bob)
    app.dependency_overrides[get_records] = lambda: ann_and_bob
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()
