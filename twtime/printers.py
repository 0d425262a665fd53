"""
Console tables for projects, tasks, time entries and time off
"""

from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import AllocationResult, Config, Project, Task, TimeEntry, TimeOff

console = Console()


def print_projects(projects: Iterable[Project], config: Config, out: Optional[Console] = None) -> None:
    table = Table("#id", "Alias", "Name")
    for project in projects:
        alias = config.get_alias(project.id)
        table.add_row(project.id, escape(alias.alias) if alias else "--", escape(project.name))
    (out or console).print(table)


def print_time_entries(entries: Iterable[TimeEntry], out: Optional[Console] = None) -> None:
    table = Table("#id", "Date", "Task", "Description", "Hours", show_lines=True)
    for entry in entries:
        task = f"{entry.project_name}\n> {entry.todo_list_name}\n> {entry.todo_item_name}"
        table.add_row(entry.id, entry.work_date.strftime("%d-%m-%Y"), escape(task), escape(entry.description), str(entry.hours))
    (out or console).print(table)


def print_tasks(tasks: Iterable[Task], out: Optional[Console] = None) -> None:
    table = Table("Id", "Name")
    for task in tasks:
        table.add_row(task.id, escape(task.name))
    (out or console).print(table)


def print_times_off(times_off: Iterable[TimeOff], out: Optional[Console] = None) -> None:
    table = Table("Date", "Hours")
    for time_off in sorted(times_off, key=lambda t: t.date, reverse=True):
        table.add_row(time_off.date, str(time_off.hours))
    (out or console).print(table)


def print_allocation(result: AllocationResult, out: Optional[Console] = None) -> None:
    out = out or console
    table = Table("Date", "Hours", "Status", "#id")
    for day in result.days:
        status = escape(day.status) if day.ok else f"[red]{escape(day.status)}[/red]"
        table.add_row(day.date.isoformat(), str(day.hours), status, day.entry_id or "--")
    out.print(table)
    out.print(f"Allocated {result.allocated_hours}h for {result.requested_hours}h requested")
