"""
Tests for the interactive menus
"""

import io
import sys
from datetime import date
from pathlib import Path

import pytest
from rich.console import Console

# Ensure the package is importable when tests run without installation
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import twtime.interactive as interactive
from twtime.interactive import InteractiveSession, MainCommand, TaskCommand, flatten_tasks
from twtime.models import AllocationResult, Config, DayAllocation, Project, Task, TaskList

REVIEW = Task(id="30", name="Review PRs", sub_tasks=(Task(id="301", name="Backend", parent_id="30"),))
DEPLOY = Task(id="31", name="Deploy")


class FakeManager:
    def __init__(self):
        self.config = Config(company_id="acme", token="t")
        self.toggled = []
        self.requests = []

    def list_projects(self, search_term=None):
        return [Project(id="10", name="Website")]

    def list_tasklists(self, project):
        return [TaskList(id="20", name="Sprint 1", uncompleted_count=2)]

    def list_tasks(self, tasklist):
        return [REVIEW, DEPLOY]

    def starred_tasks(self):
        return []

    def last_used_tasks(self):
        return [DEPLOY]

    def toggle_starred_task(self, task):
        self.toggled.append(task.id)
        self.config = self.config.with_starred_task(task.id)
        return True

    def save_time(self, request, today=None):
        self.requests.append(request)
        return AllocationResult(request=request, days=[DayAllocation(date=request.start_date, hours=8, status="DRY-RUN")])


def answer(monkeypatch, prompt_class, answers):
    answers = iter(answers)
    monkeypatch.setattr(prompt_class, "ask", lambda *args, **kwargs: next(answers))


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def session(output):
    return InteractiveSession(FakeManager(), Console(file=output, width=120))


def test_flatten_tasks_indents_sub_tasks():
    items = flatten_tasks([REVIEW, DEPLOY])

    assert [i.task.id for i in items] == ["30", "301", "31"]
    assert [i.label() for i in items] == ["Review PRs (1 sub tasks)", "    Backend", "Deploy"]


def test_labels():
    assert MainCommand.SEARCH_TASKS.label() == "Search tasks"
    assert TaskCommand.BACK.label() == "Go back"
    assert Project(id="10", name="Website").label() == "Website"


def test_select_empty_list(session, output):
    assert session.select("Choose ?", []) is None
    assert "Nothing to choose from" in output.getvalue()


def test_search_and_star_sub_task(session, monkeypatch):
    # search, project 1, task list 1, sub-task, star, back, quit
    answer(monkeypatch, interactive.IntPrompt, [2, 1, 1, 2, 2, 3, 4])

    session.run()

    assert session.manager.toggled == ["301"]


def test_star_becomes_unstar(session, monkeypatch, output):
    # last used tasks, Deploy, star, back, quit
    answer(monkeypatch, interactive.IntPrompt, [3, 1, 2, 3, 4])

    session.run()

    assert "Unstar task" in output.getvalue()


def test_log_time_retries_invalid_input(session, monkeypatch, output):
    answer(monkeypatch, interactive.Prompt, ["15/01/2024", "2024-01-15", "two days", "0h", "2d", "Development"])
    answer(monkeypatch, interactive.Confirm, [True])

    session.log_time(DEPLOY)

    request = session.manager.requests[0]
    assert (request.task_id, request.start_date, request.hours, request.description, request.dry_run) == (
        "31", date(2024, 1, 15), 16, "Development", True
    )
    text = output.getvalue()
    assert "Invalid date format" in text
    assert "Duration must be positive" in text
    assert "Allocated 8h for 16h requested" in text
