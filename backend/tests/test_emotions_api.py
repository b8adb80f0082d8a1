from __future__ import annotations

from typing import Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from brightlight.api.deps import get_emotion_classifier, get_local_cache
from brightlight.core.errors import UpstreamError
from brightlight.db.deps import get_db
from brightlight.db.models.daily_emotion import DailyEmotion
from brightlight.main import app
from brightlight.services.local_cache import LocalCache


class _StubClassifier:
    def __init__(self, scores: Dict[str, float] | None = None, error: Exception | None = None):
        self.scores = scores or {}
        self.error = error

    def classify(self, text: str) -> Dict[str, float]:
        if self.error:
            raise self.error
        return self.scores


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    DailyEmotion.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    classifier = _StubClassifier({"joy": 0.7, "neutral": 0.1, "gratitude": 0.15, "sadness": 0.05})
    cache = LocalCache()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_emotion_classifier] = lambda: classifier
    app.dependency_overrides[get_local_cache] = lambda: cache
    yield TestClient(app), TestingSessionLocal, classifier
    app.dependency_overrides.clear()


DAILY = {
    "user_id": "user-1",
    "emotions": [{"name": "joy", "value": 0.7}, {"name": "gratitude", "value": 0.15}],
    "summary": "Felt calm after a long walk",
    "greeting_texts": ["Good morning", "Welcome back"],
}


def test_analyze_returns_top_three(client):
    test_client, _, _ = client

    response = test_client.post("/emotions/analyze", json={"text": "Grateful for today"})

    assert response.status_code == 200
    assert [item["name"] for item in response.json()["top"]] == ["joy", "gratitude", "neutral"]


def test_analyze_upstream_failure_is_502(client):
    test_client, _, classifier = client
    classifier.error = UpstreamError("Emotion model did not finish loading", error_type="model_loading")

    response = test_client.post("/emotions/analyze", json={"text": "hello"})

    assert response.status_code == 502
    assert response.json()["detail"]["error"] == "upstream"


def test_daily_emotions_stored_once_per_day(client):
    test_client, session_factory, _ = client

    first = test_client.post("/emotions/daily", json=DAILY)
    second = test_client.post("/emotions/daily", json=DAILY)

    assert first.json()["stored"] is True
    assert first.json()["id"]
    assert second.json()["stored"] is False
    with session_factory() as db:
        records = db.query(DailyEmotion).all()
        assert len(records) == 1
        assert records[0].emotions == ["joy", "gratitude"]
        assert records[0].emotions_values == [0.7, 0.15]
        assert records[0].greeting_texts == {"0": "Good morning", "1": "Welcome back"}


def test_daily_emotions_without_scores_are_skipped(client):
    test_client, session_factory, _ = client

    response = test_client.post("/emotions/daily", json={**DAILY, "emotions": []})

    assert response.json()["stored"] is False
    assert test_client.post("/emotions/daily", json=DAILY).json()["stored"] is True


def test_latest_summary_flags_first_launch(client):
    test_client, _, _ = client

    assert test_client.get("/emotions/summary/latest", params={"user_id": "user-1"}).status_code == 404
    test_client.post("/emotions/daily", json=DAILY)

    first = test_client.get("/emotions/summary/latest", params={"user_id": "user-1"}).json()
    again = test_client.get("/emotions/summary/latest", params={"user_id": "user-1"}).json()

    assert first["summary"] == "Felt calm after a long walk"
    assert first["first_launch_today"] is True
    assert again["first_launch_today"] is False
