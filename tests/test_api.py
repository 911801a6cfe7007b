"""
tests/test_api.py
=================
HTTP and WebSocket surface, exercised through FastAPI's TestClient.
"""
import pytest
from fastapi.testclient import TestClient

from pwmeter import main
from pwmeter.core.logger import setup_logging


@pytest.fixture
def client():
    main.config.update_settings({})
    with TestClient(main.app) as c:
        yield c
    main.config.update_settings({})


class TestHealth:

    def test_health(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "ok"
        assert body["dictionary_words"] > 6000


class TestPasswordStrength:

    def test_dictionary_password(self, client):
        res = client.post("/api/password-strength", json={"password": "password"})
        assert res.status_code == 200
        report = res.json()
        assert report["entropy"] == 37
        assert report["in_dictionary"] is True
        assert report["range"] == {"min": 0, "max": 56, "label": "weak"}
        assert report["classes"] == ["valid", "weak"]
        assert "password" not in report

    def test_empty_password(self, client):
        report = client.post("/api/password-strength", json={"password": ""}).json()
        assert report["entropy"] == 0
        assert report["range"]["label"] == "empty"
        assert report["range"]["min"] is None
        assert report["feedback"]["score"] == 0

    def test_feedback_shape(self, client):
        feedback = client.post("/api/password-strength", json={"password": "letmein"}).json()["feedback"]
        assert 0 <= feedback["score"] <= 4
        assert isinstance(feedback["suggestions"], list)
        assert isinstance(feedback["warning"], str)

    def test_rules_from_settings(self, client):
        res = client.post("/api/settings", json={"rules": [{"pattern": ".{8,}", "description": "length >= 8"}]})
        assert res.status_code == 200
        report = client.post("/api/password-strength", json={"password": "abc"}).json()
        assert report["valid"] is False
        assert report["failed_rules"][0]["description"] == "length >= 8"
        assert "invalid" in report["classes"]

    @pytest.mark.parametrize("value", [None, 12345, ["abc"]])
    def test_non_string_password_reads_as_empty(self, client, value):
        res = client.post("/api/password-strength", json={"password": value})
        assert res.status_code == 200
        report = res.json()
        assert report["entropy"] == 0
        assert report["range"]["label"] == "empty"

    def test_missing_body_field_defaults_to_empty(self, client):
        report = client.post("/api/password-strength", json={}).json()
        assert report["entropy"] == 0


class TestSettings:

    def test_get_defaults(self, client):
        settings = client.get("/api/settings").json()
        assert [r["label"] for r in settings["ranges"]] == ["empty", "weak", "good", "strong"]
        assert settings["ranges"][0]["min"] is None
        assert settings["ranges"][-1]["max"] is None
        assert settings["rules"] == []

    def test_open_bounds_as_null(self, client):
        res = client.post("/api/settings", json={"ranges": [{"min": None, "max": None, "label": "any"}]})
        assert res.status_code == 200
        report = client.post("/api/password-strength", json={"password": "abc"}).json()
        assert report["range"]["label"] == "any"

    def test_invalid_settings_rejected(self, client):
        res = client.post("/api/settings", json={"rules": [{"pattern": ""}]})
        assert res.status_code == 422
        # previous settings still in force
        assert client.get("/api/settings").json()["rules"] == []


class TestStrengthStream:

    def test_changes_only(self, client):
        with client.websocket_connect("/ws/strength") as ws:
            ws.send_text("password")
            first = ws.receive_json()
            assert first["entropy"] == 37
            assert first["presentation"] == "apply"
            assert first["classes"] == ["valid", "weak"]

            # unchanged value gets no answer; the next reply is for "abc"
            ws.send_text("password")
            ws.send_text("abc")
            second = ws.receive_json()
            assert second["length"] == 3
            assert second["entropy"] == 14

    def test_binary_frame_reads_as_empty(self, client):
        with client.websocket_connect("/ws/strength") as ws:
            ws.send_bytes(b"abc")
            first = ws.receive_json()
            assert first["length"] == 0
            assert first["range"]["label"] == "empty"

            # connection survives and keeps scoring text frames
            ws.send_text("abc")
            assert ws.receive_json()["entropy"] == 14

    def test_streams_are_independent(self, client):
        with client.websocket_connect("/ws/strength") as one, client.websocket_connect("/ws/strength") as two:
            one.send_text("abc")
            two.send_text("abc")
            assert one.receive_json()["entropy"] == 14
            assert two.receive_json()["entropy"] == 14


class TestLogs:

    def test_reports_are_logged_without_password(self, client):
        setup_logging()
        client.post("/api/password-strength", json={"password": "hunter2hunter2"})
        messages = [entry["message"] for entry in client.get("/api/logs").json()]
        assert any("Strength report" in m for m in messages)
        assert not any("hunter2hunter2" in m for m in messages)

    def test_negative_limit_returns_nothing(self, client):
        setup_logging()
        client.post("/api/password-strength", json={"password": "abc"})
        assert client.get("/api/logs", params={"limit": -5}).json() == []
