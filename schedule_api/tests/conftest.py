import itertools
import os
import sys
from datetime import UTC, datetime

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

os.environ.setdefault("ENABLE_DB", "0")

import fakeredis
import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient

import schedule_api.controllers.events as events_controller
import schedule_api.lifespan as lifespan
import schedule_api.main as main
from schedule_api.config import OptimizerSettings
from schedule_api.dependencies import get_optimizer_settings, require_database


class InMemoryEvents:
    """Stands in for ``schedule_api.db`` with the same repository functions."""

    def __init__(self):
        self.events: dict[str, dict] = {}
        self.responses: dict[str, list[dict]] = {}
        self._ids = itertools.count(1)
        self._event_ids = itertools.count(1)

    async def create_event(self, title, description, dates, performances):
        event_id = f"evt{next(self._event_ids):07d}"
        now = datetime.now(UTC).isoformat()
        event = {
            "id": event_id,
            "title": title,
            "description": description,
            "dates": [{"id": next(self._ids), "event_id": event_id, "value": v} for v in dates],
            "performances": [
                {
                    "id": next(self._ids),
                    "event_id": event_id,
                    "title": p["title"],
                    "description": p.get("description") or "",
                }
                for p in performances
            ],
            "created_at": now,
            "updated_at": now,
        }
        self.events[event_id] = event
        self.responses[event_id] = []
        return event

    async def get_event(self, event_id):
        return self.events.get(event_id)

    async def add_response(self, event_id, name, answers, performance_ids):
        response_id = next(self._ids)
        response = {
            "id": response_id,
            "event_id": event_id,
            "name": name,
            "answers": [
                {"id": next(self._ids), "response_id": response_id, "date_id": d, "status": s}
                for d, s in answers.items()
            ],
            "performances": [
                {"id": next(self._ids), "response_id": response_id, "performance_id": p}
                for p in performance_ids
            ],
            "created_at": datetime.now(UTC).isoformat(),
        }
        self.responses[event_id].append(response)
        return response

    async def get_responses(self, event_id):
        return list(self.responses.get(event_id, []))


@pytest.fixture
def fake_db(monkeypatch):
    store = InMemoryEvents()
    monkeypatch.setattr(events_controller, "db", store)
    return store


@pytest.fixture
def client(monkeypatch, fake_db):
    server = fakeredis.FakeServer()

    monkeypatch.setattr(
        lifespan, "init_redis", lambda: fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    )
    main.app.dependency_overrides[get_optimizer_settings] = lambda: OptimizerSettings(seed=7)
    # the in-memory repository stands in for a connected database
    main.app.dependency_overrides[require_database] = lambda: None

    with TestClient(main.app) as c:
        yield c

    main.app.dependency_overrides.clear()


@pytest.fixture
def make_event(client):
    """Create an event through the API and return its JSON."""

    def _make(dates=None, performances=None, title="Spring concert"):
        payload = {
            "title": title,
            "description": "Rehearsal planning",
            "dates": dates or ["2025-04-15 15:00-17:00", "2025-04-16 15:00-17:00"],
            "performances": performances or [{"title": "Opening"}, {"title": "Finale"}],
        }
        res = client.post("/api/events", json=payload)
        assert res.status_code == 201, res.text
        return res.json()

    return _make
