"""
Tests for the timesheet manager
"""

import sys
from datetime import date, datetime
from pathlib import Path

# Ensure the package is importable when tests run without installation
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from twtime.config_manager import load_config, save_config
from twtime.models import Account, AllocationRequest, Config, Task, TimeEntry, TimeOff
from twtime.timesheet_manager import TimesheetManager


class FakeClient:
    def __init__(self, entries=()):
        self.entries = list(entries)
        self.calls = []

    def last_time_entries(self, limit, since=None):
        self.calls.append((limit, since))
        return self.entries

    def get_task(self, task_id):
        return Task(id=task_id, name=f"Task {task_id}")


def manager_for(tmp_path, client, **config_fields):
    config = Config(company_id="acme", token="t", **config_fields)
    path = tmp_path / ".teamwork"
    save_config(config, path)
    return TimesheetManager(config, path, client=client)


def test_missing_hours_uses_entries_and_time_off(tmp_path):
    client = FakeClient([TimeEntry(id="1", date=datetime(2024, 1, 15, 9), hours=8)])
    manager = manager_for(tmp_path, client, times_off=(TimeOff(date="2024-01-16", hours=4),))

    assert manager.get_missing_hours(date(2024, 1, 15), today=date(2024, 1, 18)) == 12
    assert client.calls == [(500, date(2024, 1, 15))]


def test_missing_hours_in_the_future_skips_fetch(tmp_path):
    client = FakeClient()
    manager = manager_for(tmp_path, client)

    assert manager.get_missing_hours(date(2024, 1, 18), today=date(2024, 1, 18)) == 0
    assert client.calls == []


def test_toggle_starred_task_saves_config(tmp_path):
    manager = manager_for(tmp_path, FakeClient())
    task = Task(id="30", name="Review PRs")

    assert manager.toggle_starred_task(task) is True
    assert load_config(tmp_path / ".teamwork").starred_tasks == ("30",)
    assert [t.name for t in manager.starred_tasks()] == ["Task 30"]

    assert manager.toggle_starred_task(task) is False
    assert load_config(tmp_path / ".teamwork").starred_tasks == ()


def test_save_time_dry_run(tmp_path):
    class Client(FakeClient):
        def get_account(self):
            return Account(id="42")

    manager = manager_for(tmp_path, Client(), times_off=(TimeOff(date="2024-01-15", hours=8),))
    request = AllocationRequest(task_id="30", start_date=date(2024, 1, 15), hours=8, description="Dev", dry_run=True)

    result = manager.save_time(request, today=date(2024, 1, 31))

    assert [(d.date, d.hours) for d in result.days] == [(date(2024, 1, 16), 8)]
