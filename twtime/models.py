"""
Data models for the Teamwork timesheet client
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import List, Optional, Tuple

from dateutil import parser as date_parser

DRY_RUN_STATUS = "DRY-RUN"


@dataclass(frozen=True)
class Task:
    """Represents a Teamwork task (todo item)"""
    id: str
    name: str
    parent_id: Optional[str] = field(default=None, compare=False)
    sub_tasks: Tuple["Task", ...] = field(default=(), compare=False)

    @classmethod
    def from_api(cls, data: dict, parent_id: Optional[str] = None) -> "Task":
        task_id = str(data['id'])
        sub_tasks = tuple(
            cls.from_api(sub, parent_id=task_id) for sub in data.get('subTasks') or []
        )
        return cls(
            id=task_id,
            name=data['content'],
            parent_id=parent_id or (str(data['parentTaskId']) if data.get('parentTaskId') else None),
            sub_tasks=sub_tasks,
        )

    def label(self) -> str:
        if self.sub_tasks:
            return f"{self.name} ({len(self.sub_tasks)} sub tasks)"
        return self.name


@dataclass(frozen=True)
class Project:
    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict) -> "Project":
        return cls(id=str(data['id']), name=data['name'])

    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class TaskList:
    id: str
    name: str
    uncompleted_count: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "TaskList":
        return cls(
            id=str(data['id']),
            name=data['name'],
            uncompleted_count=int(data.get('uncompleted-count', 0)),
        )

    def label(self) -> str:
        return f"{self.name} ({self.uncompleted_count} tasks)"


@dataclass(frozen=True)
class Account:
    """Identity behind the configured token"""
    id: str


@dataclass(frozen=True)
class TimeEntry:
    """Represents a time entry already logged in Teamwork"""
    id: str
    date: datetime
    hours: int
    description: str = ""
    minutes: int = 0
    project_id: str = ""
    project_name: str = ""
    todo_list_id: str = ""
    todo_list_name: str = ""
    todo_item_id: str = ""
    todo_item_name: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "TimeEntry":
        """Build an entry from a ``time-entries`` item (hyphenated keys, string numbers)"""
        return cls(
            id=str(data['id']),
            date=date_parser.isoparse(data['date']),
            hours=int(data['hours']),
            minutes=int(data.get('minutes') or 0),
            description=data.get('description') or "",
            project_id=str(data.get('project-id', '')),
            project_name=data.get('project-name', ''),
            todo_list_id=str(data.get('todo-list-id', '')),
            todo_list_name=data.get('todo-list-name', ''),
            todo_item_id=str(data.get('todo-item-id', '')),
            todo_item_name=data.get('todo-item-name', ''),
        )

    @property
    def work_date(self) -> date:
        """Calendar date of the entry in local time"""
        if self.date.tzinfo is not None:
            return self.date.astimezone().date()
        return self.date.date()

    def task(self) -> Task:
        return Task(id=self.todo_item_id, name=self.todo_item_name)


@dataclass(frozen=True)
class TimeEntryInput:
    """Payload for creating a time entry on a task"""
    description: str
    person_id: str
    date: str
    time: str
    hours: int
    minutes: int = 0

    def to_api(self) -> dict:
        return {
            "description": self.description,
            "person-id": self.person_id,
            "date": self.date,
            "time": self.time,
            "hours": str(self.hours),
            "minutes": str(self.minutes),
        }


@dataclass(frozen=True)
class EntryCreated:
    """Outcome of a time entry creation as reported by Teamwork"""
    id: Optional[str]
    status: str

    @property
    def ok(self) -> bool:
        return self.status == "OK"


@dataclass(frozen=True)
class TimeOff:
    """Locally declared time off; ``date`` is kept as a YYYY-MM-DD string"""
    date: str
    hours: int


@dataclass(frozen=True)
class ProjectAlias:
    project_id: str
    alias: str


@dataclass(frozen=True)
class Config:
    """Content of the local configuration file"""
    company_id: str
    token: str
    project_aliases: Tuple[ProjectAlias, ...] = ()
    times_off: Tuple[TimeOff, ...] = ()
    starred_tasks: Tuple[str, ...] = ()
    api_host: str = "eu.teamwork.com"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization"""
        if not self.company_id:
            raise ValueError("Company id is required")

        if not self.token:
            raise ValueError("Token is required")

    @property
    def base_url(self) -> str:
        return f"https://{self.company_id}.{self.api_host}/"

    def get_alias(self, project_id: str) -> Optional[ProjectAlias]:
        for project_alias in self.project_aliases:
            if project_alias.project_id == project_id:
                return project_alias
        return None

    def with_alias(self, project_id: str, alias: str) -> "Config":
        aliases = [a for a in self.project_aliases if a.project_id != project_id]
        aliases.append(ProjectAlias(project_id=project_id, alias=alias))
        return replace(self, project_aliases=tuple(aliases))

    def with_time_off(self, day: str, hours: int) -> "Config":
        """Declare ``hours`` off on ``day``; zero or less removes the declaration"""
        times_off = [t for t in self.times_off if t.date != day]
        if hours > 0:
            times_off.append(TimeOff(date=day, hours=hours))
        return replace(self, times_off=tuple(times_off))

    def with_starred_task(self, task_id: str) -> "Config":
        if task_id in self.starred_tasks:
            return self
        return replace(self, starred_tasks=self.starred_tasks + (task_id,))

    def without_starred_task(self, task_id: str) -> "Config":
        return replace(self, starred_tasks=tuple(t for t in self.starred_tasks if t != task_id))

    def times_off_between(self, prefix: str) -> List[TimeOff]:
        """Time off whose date starts with ``prefix`` (YYYY or YYYY-MM), newest first"""
        selected = [t for t in self.times_off if t.date.startswith(prefix)]
        return sorted(selected, key=lambda t: t.date, reverse=True)


@dataclass(frozen=True)
class AllocationRequest:
    """Block of hours to spread over the working days following ``start_date``"""
    task_id: str
    start_date: date
    hours: int
    description: str
    dry_run: bool = False

    def __post_init__(self):
        if self.hours <= 0:
            raise ValueError("Hours to allocate must be positive")


@dataclass(frozen=True)
class DayAllocation:
    """Hours placed on one day and what Teamwork said about it"""
    date: date
    hours: int
    status: str
    entry_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in ("OK", DRY_RUN_STATUS)


@dataclass
class AllocationResult:
    request: AllocationRequest
    days: List[DayAllocation] = field(default_factory=list)

    @property
    def requested_hours(self) -> int:
        return self.request.hours

    @property
    def allocated_hours(self) -> int:
        return sum(d.hours for d in self.days)

    @property
    def failed_days(self) -> List[DayAllocation]:
        return [d for d in self.days if not d.ok]
