"""
Interactive menus to browse projects and tasks and log time on them
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Protocol, Sequence, TypeVar

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from .models import AllocationRequest, Task
from .printers import print_allocation
from .timesheet_manager import TimesheetManager
from .workload import parse_duration


class Labeled(Protocol):
    def label(self) -> str:
        ...


L = TypeVar("L", bound=Labeled)


class MainCommand(Enum):
    SEE_STARRED_TASKS = "See starred tasks"
    SEARCH_TASKS = "Search tasks"
    LAST_USED_TASKS = "Last used tasks"
    QUIT = "Quit"

    def label(self) -> str:
        return self.value


class TaskCommand(Enum):
    LOG_TIME = "Log time"
    STAR = "Star task"
    UNSTAR = "Unstar task"
    BACK = "Go back"

    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class TaskItem:
    """A task as shown in a flattened task list"""
    task: Task
    is_sub: bool = False

    def label(self) -> str:
        if self.is_sub:
            return f"    {self.task.name}"
        return self.task.label()


def flatten_tasks(tasks: Sequence[Task]) -> List[TaskItem]:
    """Each task followed by its sub-tasks"""
    items = []
    for task in tasks:
        items.append(TaskItem(task))
        items.extend(TaskItem(sub_task, is_sub=True) for sub_task in task.sub_tasks)
    return items


class InteractiveSession:
    """Menu loop over a TimesheetManager"""

    def __init__(self, manager: TimesheetManager, console: Optional[Console] = None):
        self.manager = manager
        self.console = console or Console()

    def select(self, prompt: str, items: Sequence[L]) -> Optional[L]:
        """Ask the user to pick one of ``items`` by number"""
        if not items:
            self.console.print("Nothing to choose from")
            return None

        for index, item in enumerate(items, start=1):
            self.console.print(f"  {index}. {escape(item.label())}")
        choice = IntPrompt.ask(
            prompt,
            choices=[str(i) for i in range(1, len(items) + 1)],
            default=1,
            show_choices=False,
            console=self.console,
        )
        return items[choice - 1]

    def run(self) -> None:
        while True:
            command = self.select("What do you want to do ?", list(MainCommand))
            if command is MainCommand.QUIT:
                return
            elif command is MainCommand.SEE_STARRED_TASKS:
                self.choose_task(self.manager.starred_tasks())
            elif command is MainCommand.SEARCH_TASKS:
                self.search_task()
            elif command is MainCommand.LAST_USED_TASKS:
                self.choose_task(self.manager.last_used_tasks())

    def search_task(self) -> None:
        project = self.select("Choose a project ?", self.manager.list_projects())
        if project is None:
            return

        tasklist = self.select("Choose a task list ?", self.manager.list_tasklists(project))
        if tasklist is None:
            return

        self.choose_task(self.manager.list_tasks(tasklist))

    def choose_task(self, tasks: Sequence[Task]) -> None:
        item = self.select("Choose a task ?", flatten_tasks(tasks))
        if item is not None:
            self.handle_task(item.task)

    def handle_task(self, task: Task) -> None:
        while True:
            starred = task.id in self.manager.config.starred_tasks
            commands = [TaskCommand.LOG_TIME, TaskCommand.UNSTAR if starred else TaskCommand.STAR, TaskCommand.BACK]

            command = self.select(f"{escape(task.name)}: what do you want to do ?", commands)
            if command is TaskCommand.BACK:
                return
            elif command is TaskCommand.LOG_TIME:
                self.log_time(task)
            else:
                self.manager.toggle_starred_task(task)

    def ask_date(self, prompt: str) -> date:
        while True:
            value = Prompt.ask(prompt, console=self.console)
            try:
                return datetime.strptime(value.strip(), '%Y-%m-%d').date()
            except ValueError:
                self.console.print("[red]Invalid date format. Use YYYY-MM-DD[/red]")

    def ask_duration(self, prompt: str) -> int:
        while True:
            value = Prompt.ask(prompt, console=self.console)
            try:
                hours = parse_duration(value)
            except ValueError as e:
                self.console.print(f"[red]{escape(str(e))}[/red]")
                continue
            if hours > 0:
                return hours
            self.console.print("[red]Duration must be positive[/red]")

    def log_time(self, task: Task) -> None:
        start_date = self.ask_date("Start date (YYYY-MM-DD)")
        hours = self.ask_duration("Duration (e.g. 2d4h)")
        description = Prompt.ask("Description", console=self.console)
        dry_run = Confirm.ask("Dry run ?", default=True, console=self.console)

        request = AllocationRequest(
            task_id=task.id,
            start_date=start_date,
            hours=hours,
            description=description,
            dry_run=dry_run,
        )
        result = self.manager.save_time(request)
        print_allocation(result, out=self.console)
