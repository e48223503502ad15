import pytest
from fastapi.testclient import TestClient
import fakeredis.aioredis as fakeredis

import questboard.lifespan as lifespan
import questboard.main as main
from questboard.config import clear_settings_cache


@pytest.fixture
def fake_redis(monkeypatch):
    fake = fakeredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(lifespan.redis, "Redis", lambda *_args, **_kwargs: fake)
    return fake


@pytest.fixture
def memory_env(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_ENABLED", "0")
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def client(memory_env, fake_redis, monkeypatch):
    monkeypatch.setenv("CACHE_ENABLED", "1")
    clear_settings_cache()
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def client_no_cache(memory_env):
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def make_event(client):
    def _make(**overrides):
        body = {
            "name": "Dragon's Lair One-Shot",
            "description": "Session zero",
            "dates": ["2024-06-01", "2024-06-02"],
            "startHour": 18,
            "endHour": 20,
        }
        body.update(overrides)
        res = client.post("/api/events", json=body)
        assert res.status_code == 201, res.text
        return res.json()["id"]

    return _make
