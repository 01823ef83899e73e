"""Command-line interface for the task tracker.

Subcommands: add, list, complete, init. Messages for the user go to stdout;
diagnostics go through logging (stderr). Exit codes: 0 on success, 1 on
usage or validation problems and on failed adds. A failed list or complete
prints its error but still exits 0.
"""
import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Optional, Sequence

from config import Settings
from errors import TaskTrackerError, ValidationError
from storage import Storage
from theme import Theme
from tracker import Tracker

logger = logging.getLogger(__name__)

USAGE_MESSAGE = "expected 'add', 'list', or 'complete' subcommands"
TASK_ID_RE = re.compile(r'[+-]?[0-9]+')


class UsageError(Exception):
    """Raised instead of argparse's print-and-exit so run() owns the exit code."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog='tasktrack', description='Track tasks in a JSON file.')
    parser.add_argument('--file', metavar='PATH', help='task file (default: $TASKTRACK_FILE or tasks.json)')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    sub = parser.add_subparsers(dest='command', metavar='{add,list,complete,init}')

    add = sub.add_parser('add', help='add a new task')
    add.add_argument('--name', default='', help='task title')

    sub.add_parser('list', help='list all tasks')

    complete = sub.add_parser('complete', help='mark a task as completed')
    complete.add_argument('id', nargs='?', default='', help='id of the task to complete')

    init = sub.add_parser('init', help='create an empty task file')
    init.add_argument('--force', action='store_true', help='overwrite an existing task file')
    return parser


def require_title(raw: str) -> str:
    if not raw.strip():
        raise ValidationError("Task name cannot be empty")
    return raw


def parse_task_id(raw: str) -> int:
    """Parse a task id the way a strict atoi would: optional sign, ASCII
    digits only, within signed 64-bit range."""
    if raw == '':
        raise ValidationError("Please provide the task ID to complete")
    if TASK_ID_RE.fullmatch(raw) is None:
        raise ValidationError("Invalid task ID")
    value = int(raw)
    if not -2 ** 63 <= value < 2 ** 63:
        raise ValidationError("Invalid task ID")
    return value


class CLI:
    def __init__(self, settings: Settings, theme: Optional[Theme] = None):
        self.settings = settings
        self.theme: Theme = theme or Theme.from_env()

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Parse ``argv`` and dispatch; returns the process exit code."""
        parser = build_parser()
        try:
            args = parser.parse_args(argv)
        except UsageError as exc:
            logger.debug("argument error: %s", exc)
            print(USAGE_MESSAGE)
            return 1
        if args.command is None:
            print(USAGE_MESSAGE)
            return 1
        if args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        if args.file:
            self.settings.tasks_file = Path(args.file)
        tracker = Tracker(self.settings.tasks_file)
        handler = getattr(self, f'_cmd_{args.command}')
        return handler(tracker, args)

    # -------------------- command dispatch --------------------
    def _cmd_add(self, tracker: Tracker, args: argparse.Namespace) -> int:
        try:
            title = require_title(args.name)
        except ValidationError as exc:
            print(exc)
            return 1
        try:
            tracker.add_task(title)
        except TaskTrackerError as exc:
            print(f"Error adding task: {exc}")
            return 1
        print("Task added successfully!")
        return 0

    def _cmd_list(self, tracker: Tracker, args: argparse.Namespace) -> int:
        try:
            tasks = tracker.list_tasks()
        except TaskTrackerError as exc:
            print(f"Error listing tasks: {exc}")
            return 0
        if not tasks:
            print("No tasks found.")
            return 0
        print("Tasks:")
        for line in tasks.render_lines(self.theme):
            print(line)
        return 0

    def _cmd_complete(self, tracker: Tracker, args: argparse.Namespace) -> int:
        try:
            task_id = parse_task_id(args.id)
        except ValidationError as exc:
            print(exc)
            return 1
        try:
            tracker.complete_task(task_id)
        except TaskTrackerError as exc:
            print(f"Error completing task: {exc}")
            return 0
        print(f"Task {task_id} marked as completed.")
        return 0

    def _cmd_init(self, tracker: Tracker, args: argparse.Namespace) -> int:
        try:
            created = Storage.init_store(tracker.path, force=args.force)
        except TaskTrackerError as exc:
            print(f"Error initializing task store: {exc}")
            return 1
        if created:
            print(f"Initialized empty task store at {tracker.path}")
        else:
            print(f"Task store already exists at {tracker.path}")
        return 0


if __name__ == '__main__':  # pragma: no cover
    from main import main
    sys.exit(main())
