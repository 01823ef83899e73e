"""Tracker logic: holds the task list, id assignment, completion and rendering.

Every Tracker operation is one read-modify-write cycle over the whole task
file. There is no locking; two processes writing the same file at once can
lose an update.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from errors import NotFoundError
from models import Task
from storage import Storage
from theme import PLAIN, Theme

logger = logging.getLogger(__name__)

# New ids are the current task count plus this offset. Not unique once tasks
# are removed from the file by hand or two writers race.
ID_OFFSET = 5381

COMPLETED_LABEL = "Completed"
PENDING_LABEL = "Not completed"


def _timestamp(now: Optional[datetime] = None) -> str:
    moment = now or datetime.now().astimezone()
    return moment.isoformat()


class TaskList:
    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self.tasks: List[Task] = list(tasks or [])

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        nid = len(self.tasks) + ID_OFFSET
        if self.find(nid) is not None:
            logger.warning("assigned id %d is already in use; ids are derived from the task count", nid)
        return nid

    # -------------------- queries --------------------
    def find(self, task_id: int) -> Optional[Task]:
        """Return the first task with ``task_id`` or None."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    # -------------------- task operations --------------------
    def add(self, title: str, now: Optional[datetime] = None) -> Task:
        task = Task(id=self._allocate_id(), title=title, created_at=_timestamp(now))
        self.tasks.append(task)
        return task

    def complete(self, task_id: int) -> Task:
        """Mark the first task with ``task_id`` completed; later duplicates are untouched."""
        task = self.find(task_id)
        if task is None:
            raise NotFoundError(task_id)
        task.completed = True
        return task

    # -------------------- display --------------------
    def render_lines(self, theme: Theme = PLAIN) -> List[str]:
        return [format_task(task, theme) for task in self.tasks]


def format_task(task: Task, theme: Theme = PLAIN) -> str:
    label = COMPLETED_LABEL if task.completed else PENDING_LABEL
    return f"{theme.task_id(f'{task.id}.')} {task.title} [{theme.status(label, task.completed)}]"


class Tracker:
    """Task operations bound to one task file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> TaskList:
        return TaskList(Storage.load_tasks(self.path))

    def add_task(self, title: str, now: Optional[datetime] = None) -> Task:
        """Append a new task. The title is stored as given; callers reject empty ones."""
        task_list = self._load()
        task = task_list.add(title, now=now)
        Storage.save_tasks(self.path, task_list)
        logger.info("added task %d to %s", task.id, self.path)
        return task

    def list_tasks(self) -> TaskList:
        return self._load()

    def complete_task(self, task_id: int) -> Task:
        task_list = self._load()
        task = task_list.complete(task_id)
        Storage.save_tasks(self.path, task_list)
        logger.info("completed task %d in %s", task.id, self.path)
        return task

    def __str__(self) -> str:
        return f'Tracker({self.path})'
