"""Tests for the vision blueprint routes."""

import io
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from flask import Flask
from PIL import Image

from core.session_core import VisionSession
from utils.preview_store import PreviewStore


class _FakeClient:
    def __init__(self):
        self.fail_on: set[str] = set()
        self.fetch_models = MagicMock(
            return_value={"models": ["model1", "model2"], "current_model": "model1"}
        )
        self.set_model = MagicMock()

    def predict(self, image):
        if image.filename in self.fail_on:
            raise RuntimeError("predict failed")
        if image.filename.startswith("two"):
            return {"detections": [{"class": "box"}, {"class": "bottle"}]}
        return {"detections": [{"class": "box", "confidence": 0.91}]}


def _png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (50, 50), "red").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def fake_client():
    return _FakeClient()


@pytest.fixture
def session(fake_client):
    s = VisionSession(
        fake_client,
        PreviewStore(size=16),
        clock=lambda: datetime(2026, 10, 18, 8, 0, 0),
        timestamp_format="%H:%M:%S",
    )
    s.load_models()
    return s


@pytest.fixture
def app(session):
    """Create a minimal Flask app with the vision blueprint."""
    app = Flask(__name__)
    app.config["TESTING"] = True

    from web.blueprints.vision import init_vision

    init_vision(app, session)
    return app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


def _select(client, *names):
    data = {"files": [(io.BytesIO(_png_bytes()), name, "image/png") for name in names]}
    return client.post("/api/images", data=data, content_type="multipart/form-data")


class TestImageSelection:
    def test_select_returns_preview_urls(self, client):
        response = _select(client, "a.png", "b.png")

        assert response.status_code == 200
        data = response.get_json()
        assert data["count"] == 2
        preview = client.get(data["previews"][0])
        assert preview.status_code == 200
        assert preview.mimetype == "image/png"

    def test_replaced_previews_are_released(self, client):
        old = _select(client, "a.png").get_json()["previews"]
        _select(client, "b.png")

        assert client.get(old[0]).status_code == 404


class TestUpload:
    def test_upload_without_selection_is_rejected(self, client):
        response = client.post("/api/upload")

        assert response.status_code == 400
        assert response.get_json()["notices"] == ["Please select at least one image."]

    def test_upload_returns_summary(self, client):
        _select(client, "one.png", "two.png")

        response = client.post("/api/upload")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "completed"
        assert data["processed"] == 2
        assert data["failed"] == 0
        assert data["total"] == 3
        assert data["rows"][0] == {
            "id": 1,
            "type": "box",
            "count": 2,
            "timestamps": "08:00:00, 08:00:00",
        }

    def test_upload_failure_is_reported_once(self, client, fake_client):
        fake_client.fail_on = {"b.png"}
        _select(client, "a.png", "b.png", "c.png")

        data = client.post("/api/upload").get_json()

        assert data["processed"] == 2
        assert data["failed"] == 1
        assert data["notices"] == ["Failed to upload and process an image."]

    def test_upload_while_busy_returns_conflict(self, client, session):
        _select(client, "a.png")
        session._orchestrator._busy_lock.acquire()
        try:
            response = client.post("/api/upload")
        finally:
            session._orchestrator._busy_lock.release()

        assert response.status_code == 409


class TestResults:
    def test_results_json_is_structured_view(self, client):
        _select(client, "a.png")
        client.post("/api/upload")

        response = client.get("/api/results/json")

        assert response.status_code == 200
        data = response.get_json()
        assert data["view"] == [{"type": "box", "count": 1, "timestamps": "08:00:00"}]
        assert data["notices"] == []

    def test_results_json_empty(self, client):
        assert client.get("/api/results/json").get_json()["view"] == []

    def test_results_json_drains_pending_notices(self, client, session):
        session.notify("Skipped notes.txt: only image files can be uploaded.")

        data = client.get("/api/results/json").get_json()

        assert data["notices"] == ["Skipped notes.txt: only image files can be uploaded."]
        assert session.drain_notices() == []

    def test_report_without_results_is_rejected(self, client):
        response = client.get("/api/report.pdf")

        assert response.status_code == 400
        assert "No data available" in response.get_json()["error"]

    def test_report_download(self, client):
        _select(client, "a.png")
        client.post("/api/upload")

        response = client.get("/api/report.pdf")

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert "VisionBox_Detection_Report.pdf" in response.headers["Content-Disposition"]
        assert response.data.startswith(b"%PDF")


class TestModels:
    def test_get_models(self, client):
        data = client.get("/api/models").get_json()

        assert data["current"] == "model1"
        assert [m["id"] for m in data["available"]] == ["model1", "model2"]

    def test_select_model_success(self, client, fake_client):
        response = client.post("/api/models/select", json={"model_id": "model2"})

        assert response.status_code == 200
        data = response.get_json()
        assert data["switched"] is True
        assert data["current"] == "model2"
        assert data["notices"] == ["Model switched to model2"]
        fake_client.set_model.assert_called_once_with("model2")

    def test_select_model_failure_keeps_choice(self, client, fake_client):
        fake_client.set_model.side_effect = RuntimeError("down")

        response = client.post("/api/models/select", json={"model_id": "model2"})

        assert response.status_code == 502
        data = response.get_json()
        assert data["current"] == "model2"
        assert data["notices"] == ["Failed to switch the model."]

    def test_select_model_requires_id(self, client):
        response = client.post("/api/models/select", json={})
        assert response.status_code == 400

    def test_select_unknown_model(self, client):
        response = client.post("/api/models/select", json={"model_id": "nope"})
        assert response.status_code == 400


def test_index_renders(client):
    response = client.get("/")

    assert response.status_code == 200
    assert b"Upload and Process" in response.data
    assert b"model1- For boxes and cartons" in response.data
