"""
Teamwork API integration: projects, tasks and time entries
"""

import logging
from datetime import date
from typing import Callable, List, Optional, TypeVar

import requests

from .models import Account, Config, EntryCreated, Project, Task, TaskList, TimeEntry, TimeEntryInput

logger = logging.getLogger(__name__)

T = TypeVar("T")

REQUEST_TIMEOUT = 30


class TeamworkError(Exception):
    """Raised when a Teamwork call fails or returns an unexpected body"""
    pass


class TeamworkClient:
    """Thin client over the Teamwork REST API with basic auth on the token"""

    def __init__(self, config: Config):
        self.config = config
        self.session = requests.Session()
        # The token is the user name, the password is ignored
        self.session.auth = (config.token, "")
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })
        self._account_cache: Optional[Account] = None

    def _url(self, path: str) -> str:
        return self.config.base_url + path.lstrip('/')

    def _make_request(self, method: str, path: str, **kwargs) -> dict:
        """Make HTTP request and decode the JSON body, mapping failures to TeamworkError"""
        url = self._url(path)
        try:
            response = self.session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
            response.raise_for_status()
        except requests.exceptions.Timeout:
            raise TeamworkError(f"Request timeout for {method} {url}")
        except requests.exceptions.ConnectionError:
            raise TeamworkError(f"Connection error for {method} {url}")
        except requests.exceptions.HTTPError as e:
            if e.response.status_code == 401:
                raise TeamworkError("Authentication failed. Please check your Teamwork token.")
            elif e.response.status_code == 403:
                raise TeamworkError("Access denied. Please check your Teamwork permissions.")
            elif e.response.status_code == 404:
                raise TeamworkError(f"Resource not found: {url}")
            else:
                raise TeamworkError(f"HTTP error {e.response.status_code}: {e.response.text}")
        except requests.exceptions.RequestException as e:
            raise TeamworkError(f"Request failed: {e}")

        try:
            body = response.json()
        except ValueError as e:
            raise TeamworkError(f"Invalid JSON response for {method} {url}: {e}")
        if not isinstance(body, dict):
            raise TeamworkError(f"Unexpected response for {method} {url}: {body!r}")
        return body

    @staticmethod
    def _parse(description: str, build: Callable[[], T]) -> T:
        try:
            return build()
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise TeamworkError(f"Unexpected {description} response: {e!r}")

    def get_account(self) -> Account:
        """Get the account behind the token, cached for the client lifetime"""
        if self._account_cache is not None:
            return self._account_cache

        body = self._make_request('GET', 'me.json')
        account = self._parse("account", lambda: Account(id=str(body['person']['id'])))
        self._account_cache = account
        logger.debug(f"Using account #{account.id}")
        return account

    def list_projects(self, search_term: Optional[str] = None) -> List[Project]:
        params = {'searchTerm': search_term} if search_term else None
        body = self._make_request('GET', 'projects.json', params=params)
        return self._parse("projects", lambda: [Project.from_api(p) for p in body['projects']])

    def list_tasklists(self, project_id: str) -> List[TaskList]:
        body = self._make_request('GET', f'projects/{project_id}/tasklists.json')
        return self._parse("task lists", lambda: [TaskList.from_api(t) for t in body['tasklists']])

    def list_tasks(self, tasklist_id: str) -> List[Task]:
        """List the tasks of a task list with their sub-tasks nested"""
        body = self._make_request(
            'GET', f'tasklists/{tasklist_id}/tasks.json', params={'nestSubTasks': 'yes'}
        )
        return self._parse("tasks", lambda: [Task.from_api(t) for t in body['todo-items']])

    def get_task(self, task_id: str) -> Task:
        body = self._make_request('GET', f'tasks/{task_id}.json')
        return self._parse("task", lambda: Task.from_api(body['todo-item']))

    def last_time_entries(self, limit: int, since: Optional[date] = None) -> List[TimeEntry]:
        """Fetch the current user's time entries, newest first"""
        account = self.get_account()

        params = {
            'userId': account.id,
            'pageSize': str(limit),
            'sortby': 'date',
            'sortorder': 'DESC',
        }
        if since is not None:
            params['fromdate'] = since.strftime('%Y%m%d')

        body = self._make_request('GET', 'time_entries.json', params=params)
        entries = self._parse("time entries", lambda: [TimeEntry.from_api(e) for e in body['time-entries']])
        logger.debug(f"Retrieved {len(entries)} time entries")
        return entries

    def last_used_tasks(self, limit: int = 60) -> List[Task]:
        """Distinct tasks of the last time entries, most recently used first"""
        tasks = []
        for entry in self.last_time_entries(limit):
            task = entry.task()
            if task not in tasks:
                tasks.append(task)
        return tasks

    def create_time_entry(self, task_id: str, entry: TimeEntryInput) -> EntryCreated:
        """Log a time entry on a task"""
        logger.debug(f"Submitting time entry on task {task_id}: {entry.date} {entry.hours}h")
        body = self._make_request(
            'POST',
            f'tasks/{task_id}/time_entries.json',
            json={"time-entry": entry.to_api()}
        )
        return self._parse(
            "time entry creation",
            lambda: EntryCreated(
                id=str(body['timeLogId']) if body.get('timeLogId') is not None else None,
                status=body['STATUS'],
            )
        )
