#!/usr/bin/env python3
"""
Teamwork timesheet client
Command-line interface: projects, time entries, time off and interactive mode
"""

import argparse
import logging
import sys
from datetime import date, datetime

from .config_manager import (
    DEFAULT_CONFIG_PATH, ConfigurationError, load_config, save_alias, save_time_off,
    save_token_and_company, setup_logging
)
from .interactive import InteractiveSession
from .models import AllocationRequest, Config
from .printers import console, print_allocation, print_projects, print_tasks, print_time_entries, print_times_off
from .teamwork import TeamworkError
from .timesheet_manager import TimesheetManager
from .workload import parse_duration, split_days_hours

logger = logging.getLogger(__name__)


def validate_date(date_str: str) -> date:
    """Validate and parse date string"""
    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Could not parse {date_str!r} using format YYYY-MM-DD")


def validate_duration(duration_str: str) -> int:
    try:
        hours = parse_duration(duration_str)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    if hours <= 0:
        raise argparse.ArgumentTypeError("Duration must be positive")
    return hours


def validate_month(month_str: str) -> str:
    if not month_str.isdigit() or not 1 <= int(month_str) <= 12:
        raise argparse.ArgumentTypeError(f"Invalid month {month_str!r}, expected 1 to 12")
    return f"{int(month_str):02d}"


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="tw-time",
        description="Personal command-line client for Teamwork time tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Save credentials
  tw-time auth -c mycompany -t twp_xxxxxxxx

  # Hours not logged since the first of the month
  tw-time time-entries missing -s 2024-01-01

  # Spread 2 days and 4 hours on a task, starting on a Monday
  tw-time time-entries save -t 123456 -s 2024-01-15 -H 2d4h -d "Development" --dry-run

  # Declare half a day off
  tw-time time-off save -d 2024-01-19 -H 4
        """
    )

    parser.add_argument(
        '--config',
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help=f'Configuration file path (default: {DEFAULT_CONFIG_PATH})'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Override the log level stored in the configuration'
    )

    commands = parser.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True

    auth = commands.add_parser('auth', help='Save the company id and API token')
    auth.add_argument('-c', '--company-id', required=True, help='Teamwork company (sub-domain)')
    auth.add_argument('-t', '--token', required=True, help='Teamwork API token')

    project = commands.add_parser('project', help='List and alias projects')
    project_commands = project.add_subparsers(dest='project_command', metavar='ACTION')
    project_commands.required = True
    project_list = project_commands.add_parser('list', help='List projects')
    project_list.add_argument('-t', '--term', help='Search term')
    project_alias = project_commands.add_parser('alias', help='Give a project a local alias')
    project_alias.add_argument('-i', '--id', required=True, help='Project id')
    project_alias.add_argument('-n', '--name', required=True, help='Alias')

    entries = commands.add_parser('time-entries', help='List, check and save time entries')
    entries_commands = entries.add_subparsers(dest='entries_command', metavar='ACTION')
    entries_commands.required = True
    entries_last = entries_commands.add_parser('last', help='Show the last time entries')
    entries_last.add_argument('-n', '--nb', type=int, default=10, help='Number of entries (default: 10)')
    entries_commands.add_parser('last-tasks', help='Show the tasks of the last time entries')
    entries_missing = entries_commands.add_parser('missing', help='Hours not logged since a date')
    entries_missing.add_argument('-s', '--since', type=validate_date, required=True,
                                 help='First day to check (YYYY-MM-DD)')
    entries_save = entries_commands.add_parser('save', help='Spread hours on a task over the next working days')
    entries_save.add_argument('-t', '--task-id', required=True, help='Task id')
    entries_save.add_argument('-s', '--start-date', type=validate_date, required=True,
                              help='First day to fill (YYYY-MM-DD)')
    entries_save.add_argument('-H', '--hours', type=validate_duration, required=True,
                              help='Duration, e.g. 8d4h for 8 days and 4 hours')
    entries_save.add_argument('-d', '--description', required=True, help='Description of every entry')
    entries_save.add_argument('-r', '--dry-run', action='store_true', help='Show the entries without saving them')

    time_off = commands.add_parser('time-off', help='Declare and list time off')
    time_off_commands = time_off.add_subparsers(dest='time_off_command', metavar='ACTION')
    time_off_commands.required = True
    time_off_save = time_off_commands.add_parser('save', help='Declare time off on a day (0 hours removes it)')
    time_off_save.add_argument('-d', '--date', type=validate_date, required=True, help='Day off (YYYY-MM-DD)')
    time_off_save.add_argument('-H', '--hours', type=int, default=8, help='Hours off (default: 8)')
    time_off_list = time_off_commands.add_parser('list', help='List time off')
    time_off_list.add_argument('-y', '--year', help='Year (default: current year)')
    time_off_list.add_argument('-m', '--month', type=validate_month, help='Month (1-12)')

    commands.add_parser('interactive', help='Browse projects and tasks interactively')

    return parser.parse_args(argv)


def handle_project_command(args, manager: TimesheetManager) -> None:
    if args.project_command == 'list':
        logger.info("List projects ...")
        print_projects(manager.list_projects(args.term), manager.config)
    elif args.project_command == 'alias':
        save_alias(args.id, args.name, args.config)
        console.print(f"Alias {args.name} saved for project {args.id}")


def handle_time_entries_command(args, manager: TimesheetManager) -> None:
    if args.entries_command == 'last':
        logger.info("Last time entries ...")
        print_time_entries(manager.last_time_entries(args.nb))

    elif args.entries_command == 'last-tasks':
        logger.info("Last tasks ...")
        print_tasks(manager.last_used_tasks())

    elif args.entries_command == 'missing':
        logger.info(f"Getting missing entries since {args.since.isoformat()} ...")
        days, hours = split_days_hours(manager.get_missing_hours(args.since))
        console.print(f"Missing {days} days and {hours} hours")

    elif args.entries_command == 'save':
        request = AllocationRequest(
            task_id=args.task_id,
            start_date=args.start_date,
            hours=args.hours,
            description=args.description,
            dry_run=args.dry_run,
        )
        print_allocation(manager.save_time(request))


def handle_time_off_command(args, config: Config) -> None:
    if args.time_off_command == 'save':
        save_time_off(args.date.isoformat(), args.hours, args.config)
        if args.hours > 0:
            console.print(f"{args.hours} hours off saved on {args.date.isoformat()}")
        else:
            console.print(f"Time off removed on {args.date.isoformat()}")

    elif args.time_off_command == 'list':
        selection = args.year or str(date.today().year)
        if args.month:
            selection = f"{selection}-{args.month}"
        print_times_off(config.times_off_between(selection))


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)
    setup_logging(level=args.log_level)

    if args.command == 'auth':
        try:
            save_token_and_company(args.company_id, args.token, args.config)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            sys.exit(1)
        console.print(f"Company and token saved in {args.config}")
        return

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        logger.error("Please run 'tw-time auth' to recreate the configuration file")
        sys.exit(1)

    if config is None:
        console.print(f"No config file {args.config} found. Init it by authenticating with command `auth`")
        return

    setup_logging(config, args.log_level)
    manager = TimesheetManager(config, args.config)

    try:
        if args.command == 'project':
            handle_project_command(args, manager)
        elif args.command == 'time-entries':
            handle_time_entries_command(args, manager)
        elif args.command == 'time-off':
            handle_time_off_command(args, manager.config)
        elif args.command == 'interactive':
            InteractiveSession(manager, console).run()

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        sys.exit(1)
    except TeamworkError as e:
        logger.error(f"Teamwork error: {e}")
        sys.exit(1)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
