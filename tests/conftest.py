"""Shared test fixtures for the ListingRadar test suite."""

import pytest

from listing_radar.history import HistoryStore
from listing_radar.storage import MemoryStorage

from .fakes import FakeScheduleService


@pytest.fixture
def storage():
    """Empty in-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def history(storage):
    """History store over the in-memory storage, already loaded."""
    store = HistoryStore(storage)
    store.load()
    return store


@pytest.fixture
def schedule_service():
    """Scheduler with the target schedule plus one other, and three executions."""
    return FakeScheduleService(
        schedules=[
            {"id": "other", "is_active": False, "cron_expression": "0 9 * * *"},
            {"id": "target", "is_active": True, "cron_expression": "0 * * * *",
             "timezone": "America/New_York", "next_run_time": "2026-03-01T11:00:00Z"},
        ],
        executions=[
            {"id": "e3", "executed_at": "2026-03-01T10:00:00Z", "success": True},
            {"id": "e2", "executed_at": "2026-03-01T09:00:00Z", "success": False},
            {"id": "e1", "executed_at": "2026-03-01T08:00:00Z", "success": True},
        ],
    )


@pytest.fixture
def config_file(tmp_path):
    """A config.yaml pointing data and logs into tmp_path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "agent:\n"
        "  name: test_radar\n"
        "  log_level: DEBUG\n"
        f"  data_dir: {tmp_path / 'data'}\n"
        f"  logs_dir: {tmp_path / 'logs'}\n"
        "api:\n"
        "  base_url: http://agent.invalid/api\n"
        "scheduler:\n"
        "  base_url: http://scheduler.invalid\n"
        "  schedule_id: target\n"
        "  log_limit: 5\n"
        "server:\n"
        "  port: 9000\n"
    )
    return path
