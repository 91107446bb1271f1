# tests/test_rate_limit.py
from __future__ import annotations

from fastapi import FastAPI
from starlette.testclient import TestClient

from sitecopy.core.settings import settings
from sitecopy.middleware.ratelimit import RateLimitMiddleware


def _app() -> FastAPI:
    # app mínima: cada test arranca con ventanas limpias
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, prefix="/api/v1")

    @app.get("/api/v1/content/value")
    def value():
        return {"value": "ok"}

    @app.post("/api/v1/content")
    def create():
        return {"id": 1}

    @app.get("/api/v1/content")
    def listing():
        return {"entries": []}

    return app


def test_disabled_by_default(monkeypatch):
    monkeypatch.setattr(settings, "RATELIMIT_ENABLED", False)
    monkeypatch.setattr(settings, "RATELIMIT_LOOKUP_PER_MIN", 1)
    client = TestClient(_app())
    for _ in range(3):
        assert client.get("/api/v1/content/value").status_code == 200


def test_public_lookup_limited_per_ip(monkeypatch):
    monkeypatch.setattr(settings, "RATELIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATELIMIT_LOOKUP_PER_MIN", 2)
    client = TestClient(_app())

    assert client.get("/api/v1/content/value").status_code == 200
    assert client.get("/api/v1/content/value").status_code == 200
    r = client.get("/api/v1/content/value")
    assert r.status_code == 429
    assert r.headers["Retry-After"] == "60"
    assert r.json()["code"] == "RATE_LIMITED"

    # el listado admin no cuenta como lectura pública
    assert client.get("/api/v1/content").status_code == 200


def test_writes_limited_per_token(monkeypatch):
    monkeypatch.setattr(settings, "RATELIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATELIMIT_WRITE_PER_MIN", 3)
    client = TestClient(_app())

    for _ in range(3):
        assert client.post("/api/v1/content", headers={"Authorization": "Bearer a"}).status_code == 200
    assert client.post("/api/v1/content", headers={"Authorization": "Bearer a"}).status_code == 429
    # otro token, otra ventana
    assert client.post("/api/v1/content", headers={"Authorization": "Bearer b"}).status_code == 200
