from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from leafguard import api
from leafguard.config import Settings
from leafguard.leafguard_agent import LeafGuardAgent


@pytest.fixture
def client(monkeypatch):
    with TestClient(api.app) as c:
        monkeypatch.setattr(api, "agent", LeafGuardAgent(settings=Settings(remote_url="")))
        yield c


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_green_leaf(client, green_png):
    response = client.post("/analyze", files={"image": ("leaf.png", green_png, "image/png")})
    assert response.status_code == 200

    body = response.json()
    assert body["disease"] == "healthy"
    assert body["source"] == "local-heuristic"
    assert body["severity"] == "None"
    assert body["alternatives"] == []
    assert 0.85 <= body["confidence"] < 0.95
    assert body["symptoms"] and body["control_measures"]


def test_analyze_dark_leaf(client, dark_png):
    body = client.post("/analyze", files={"image": ("spots.png", dark_png, "image/png")}).json()
    assert body["disease"] == "leaf_spot"
    assert body["alternatives"]
    assert all(a["confidence"] < body["confidence"] for a in body["alternatives"])


def test_explicit_seed_is_reproducible(client, green_png):
    first = client.post("/analyze", files={"image": ("a.png", green_png, "image/png")}, data={"seed": "s-1"}).json()
    second = client.post("/analyze", files={"image": ("b.png", green_png, "image/png")}, data={"seed": "s-1"}).json()
    assert first["confidence"] == second["confidence"]


def test_corrupt_image_is_unprocessable(client):
    response = client.post("/analyze", files={"image": ("leaf.png", b"garbage", "image/png")})
    assert response.status_code == 422


def test_oversized_upload_is_rejected(monkeypatch, client, green_png):
    monkeypatch.setattr(api, "agent", LeafGuardAgent(settings=Settings(remote_url="", max_upload_bytes=64)))
    response = client.post("/analyze", files={"image": ("leaf.png", green_png, "image/png")})
    assert response.status_code == 413


def test_missing_image_is_rejected(client):
    assert client.post("/analyze").status_code == 422
