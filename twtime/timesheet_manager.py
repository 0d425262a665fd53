"""
Timesheet manager: coordinates the Teamwork client, the workload
computations and the local configuration
"""

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Union

from .allocation import TimeAllocator
from .config_manager import DEFAULT_CONFIG_PATH, save_config
from .models import AllocationRequest, AllocationResult, Config, Project, Task, TaskList, TimeEntry
from .teamwork import TeamworkClient
from .workload import missing_hours

logger = logging.getLogger(__name__)

MISSING_ENTRIES_LIMIT = 500


class TimesheetManager:
    """Entry point for every operation that needs the configuration"""

    def __init__(self, config: Config, config_file: Union[str, Path] = DEFAULT_CONFIG_PATH,
                 client: Optional[TeamworkClient] = None):
        self.config = config
        self.config_file = config_file
        self.client = client or TeamworkClient(config)

    def list_projects(self, search_term: Optional[str] = None) -> List[Project]:
        return self.client.list_projects(search_term)

    def list_tasklists(self, project: Project) -> List[TaskList]:
        return self.client.list_tasklists(project.id)

    def list_tasks(self, tasklist: TaskList) -> List[Task]:
        return self.client.list_tasks(tasklist.id)

    def starred_tasks(self) -> List[Task]:
        return [self.client.get_task(task_id) for task_id in self.config.starred_tasks]

    def last_time_entries(self, limit: int = 10) -> List[TimeEntry]:
        return self.client.last_time_entries(limit)

    def last_used_tasks(self) -> List[Task]:
        return self.client.last_used_tasks()

    def get_missing_hours(self, since: date, today: Optional[date] = None) -> int:
        """Hours not logged on the working days from ``since`` to yesterday"""
        today = today or date.today()
        if today <= since:
            return 0

        entries = self.client.last_time_entries(MISSING_ENTRIES_LIMIT, since)
        return missing_hours(since, entries, self.config.times_off, today)

    def save_time(self, request: AllocationRequest, today: Optional[date] = None) -> AllocationResult:
        allocator = TimeAllocator(self.client, self.config.times_off)
        return allocator.save_time(request, today)

    def toggle_starred_task(self, task: Task) -> bool:
        """Star or unstar a task and save the configuration; returns the new state"""
        starred = task.id not in self.config.starred_tasks
        if starred:
            self.config = self.config.with_starred_task(task.id)
        else:
            self.config = self.config.without_starred_task(task.id)
        save_config(self.config, self.config_file)
        logger.info(f"Task {task.name} {'starred' if starred else 'unstarred'}")
        return starred
