"""Data models for the task tracker.

Exposes the Task dataclass plus its mapping to the on-disk JSON entry.
Stored keys are "id", "title", "CreatedAt", "status"; the mixed casing is
kept as-is when writing so existing task files stay readable. Reading
matches keys case-insensitively and treats a missing or null "status" as false.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Tuple

from errors import FormatError

TaskEntry = Dict[str, Any]

ID_KEY = 'id'
TITLE_KEY = 'title'
CREATED_KEY = 'CreatedAt'
STATUS_KEY = 'status'

# RFC 3339: date, time, optional fraction of any length, Z or +hh:mm offset
RFC3339_RE = re.compile(
    r'([0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2})'
    r'(?:\.[0-9]+)?'
    r'(?:Z|[+-]([0-9]{2}):([0-9]{2}))'
)


def is_timestamp(value: str) -> bool:
    """Return True if ``value`` is an RFC 3339 timestamp with a valid date and time."""
    match = RFC3339_RE.fullmatch(value)
    if match is None:
        return False
    try:
        datetime.strptime(match.group(1), '%Y-%m-%dT%H:%M:%S')
    except ValueError:
        return False
    if match.group(2) is not None:
        return int(match.group(2)) < 24 and int(match.group(3)) < 60
    return True


def _lookup(raw: Mapping[str, Any], key: str) -> Tuple[Any, bool]:
    """Find ``key`` in a stored entry, exact match first, then ignoring case."""
    if key in raw:
        return raw[key], True
    folded = key.casefold()
    for name, value in raw.items():
        if isinstance(name, str) and name.casefold() == folded:
            return value, True
    return None, False


@dataclass
class Task:
    """A single tracked task.

    Fields:
        id: Integer id assigned at creation (count of existing tasks + 5381).
        title: Short, single-line title.
        created_at: ISO timestamp string, set once when the task is added.
        completed: True once the task has been marked complete.
    """
    id: int
    title: str
    created_at: str
    completed: bool = False

    def to_dict(self) -> TaskEntry:
        return {
            ID_KEY: self.id,
            TITLE_KEY: self.title,
            CREATED_KEY: self.created_at,
            STATUS_KEY: self.completed,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], index: int = 0) -> "Task":
        """Build a Task from one stored entry, raising FormatError on bad shape."""
        if not isinstance(raw, Mapping):
            raise FormatError(f"entry {index}: expected an object, got {type(raw).__name__}")
        tid, _ = _lookup(raw, ID_KEY)
        # bool is an int subclass; reject it explicitly
        if not isinstance(tid, int) or isinstance(tid, bool):
            raise FormatError(f"entry {index}: '{ID_KEY}' must be an integer")
        title, _ = _lookup(raw, TITLE_KEY)
        if not isinstance(title, str):
            raise FormatError(f"entry {index}: '{TITLE_KEY}' must be a string")
        created_at, _ = _lookup(raw, CREATED_KEY)
        if not isinstance(created_at, str) or not is_timestamp(created_at):
            raise FormatError(f"entry {index}: '{CREATED_KEY}' must be an RFC 3339 timestamp")
        status, present = _lookup(raw, STATUS_KEY)
        if not present or status is None:
            status = False
        if not isinstance(status, bool):
            raise FormatError(f"entry {index}: '{STATUS_KEY}' must be a boolean")
        return cls(id=tid, title=title, created_at=created_at, completed=status)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, title={self.title}, completed={self.completed})"
