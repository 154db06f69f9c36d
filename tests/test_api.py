"""Tests for the HTTP API."""

import json

import pytest
from fastapi.testclient import TestClient

from listing_radar.api import create_app
from listing_radar.orchestrator import ScanOrchestrator
from listing_radar.reconciler import ScheduleReconciler
from listing_radar.settings_store import SettingsStore

from .fakes import FakeAgent, scan_payload


def _ok(**overrides):
    return {"success": True, "response": {"result": json.dumps(scan_payload(**overrides))}}


@pytest.fixture
def settings_store(storage):
    return SettingsStore(storage)


@pytest.fixture
def agent():
    return FakeAgent()


@pytest.fixture
def client(agent, history, schedule_service, settings_store):
    orchestrator = ScanOrchestrator(agent, history, settings_provider=settings_store.load)
    reconciler = ScheduleReconciler(schedule_service, target_id="target")
    app = create_app(orchestrator, history, reconciler, settings_store)
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"


class TestScanAndHistory:
    def test_scan_records_and_lists(self, client, agent):
        agent.replies.append(_ok())

        resp = client.post("/scan")
        body = resp.json()

        assert body["started"] is True
        assert body["outcome"] == "success"
        assert body["state"] == "idle"
        assert body["message"]["text"] == "Scan complete -- 2 new listings found, email sent!"

        history = client.get("/history").json()
        assert history["count"] == 1
        assert history["entries"][0]["result"]["total_listings_found"] == 2

    def test_failed_scan(self, client, agent):
        agent.replies.append({"success": False, "error": "quota exceeded"})

        body = client.post("/scan").json()

        assert body["outcome"] == "failure"
        assert body["message"] == {"type": "error", "text": "quota exceeded"}
        assert client.get("/history").json()["count"] == 0

    def test_filter(self, client, agent):
        agent.replies.append(_ok(listings=[{"title": "Loft", "listing_type": "apartment"}]))
        client.post("/scan")

        assert client.get("/history", params={"filter": "jobs"}).json()["count"] == 0
        assert client.get("/history", params={"filter": "apartments"}).json()["count"] == 1

    def test_invalid_filter(self, client):
        assert client.get("/history", params={"filter": "boats"}).status_code == 422

    def test_sample_mode(self, client):
        history = client.get("/history", params={"sample": True}).json()
        assert [e["id"] for e in history["entries"]] == ["s1", "s2", "s3"]

        latest = client.get("/latest", params={"sample": True}).json()["latest"]
        assert latest["id"] == "sample"

        stats = client.get("/stats", params={"sample": True}).json()
        assert stats["total_scans"] == 3
        assert stats["emails_sent"] == 2

        assert client.get("/history").json()["count"] == 0

    def test_latest_empty(self, client):
        assert client.get("/latest").json() == {"latest": None}

    def test_dismiss_status(self, client, agent):
        agent.replies.append(_ok())
        client.post("/scan")

        assert client.get("/status").json()["message"] is not None
        assert client.delete("/status").json()["message"] is None


class TestSchedule:
    def test_refreshed_on_startup(self, client, schedule_service):
        body = client.get("/schedule").json()

        assert body["schedule"]["id"] == "target"
        assert len(body["logs"]) == 3

    def test_toggle(self, client, schedule_service):
        body = client.post("/schedule/toggle").json()

        assert body["toggled"] is True
        assert body["schedule"]["is_active"] is False
        assert ("pause", "target") in schedule_service.calls

    def test_toggle_without_schedule(self, history, settings_store):
        from .fakes import FakeScheduleService

        orchestrator = ScanOrchestrator(FakeAgent(), history)
        reconciler = ScheduleReconciler(FakeScheduleService(), target_id="target")
        app = create_app(orchestrator, history, reconciler, settings_store)

        with TestClient(app) as client:
            assert client.post("/schedule/toggle").status_code == 404


class TestSettings:
    def test_defaults(self, client):
        body = client.get("/settings").json()

        assert body["listingType"] == "both"
        assert body["keywords"] == []

    def test_update_feeds_next_scan(self, client, agent):
        resp = client.put("/settings", json={"keywords": ["welder"], "listingType": "jobs"})
        assert resp.status_code == 200

        agent.replies.append(_ok())
        client.post("/scan")

        assert "Keywords: welder" in agent.calls[0]["message"]
        assert "Listing Type: Jobs" in agent.calls[0]["message"]

    def test_invalid_settings_rejected(self, client):
        assert client.put("/settings", json={"listingType": "boats"}).status_code == 422
