"""Error types raised by the task store and tracker."""


class TaskTrackerError(Exception):
    """Base class for all task tracker failures."""


class StorageError(TaskTrackerError):
    """The task file could not be opened, read, created or written."""


class FormatError(TaskTrackerError):
    """The task file does not hold a valid list of tasks."""


class ValidationError(TaskTrackerError):
    """User input was rejected (empty task name, malformed id)."""


class NotFoundError(TaskTrackerError):
    """No task carries the requested id."""

    def __init__(self, task_id: int):
        super().__init__(f"task with ID {task_id} not found")
        self.task_id = task_id
