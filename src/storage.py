"""Persistence helpers (load/save/init) for the task file.

The whole file is read on every load and rewritten on every save. Saves go
through a temporary file in the target directory that is then renamed over
the original, so an interrupted write never leaves a truncated task file.
"""
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List, Union

from errors import FormatError, StorageError
from models import Task

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

JSON_INDENT = 2


class Storage:
    @staticmethod
    def load_tasks(path: PathLike) -> List[Task]:
        """Load every task stored at ``path``.

        Raises StorageError when the file is missing or unreadable and
        FormatError when its content is not a JSON array of task entries.
        A literal ``null`` document is read as an empty list.
        """
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
            raise FormatError(f"error deserializing JSON in {path}: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"error opening file {path}: {exc.strerror or exc}") from exc
        if data is None:
            data = []
        if not isinstance(data, list):
            raise FormatError(f"{path}: expected a JSON array of tasks, got {type(data).__name__}")
        tasks = [Task.from_dict(raw, index) for index, raw in enumerate(data)]
        logger.debug("loaded %d task(s) from %s", len(tasks), path)
        return tasks

    @staticmethod
    def save_tasks(path: PathLike, tasks: Iterable[Task]) -> None:
        """Persist tasks to disk (pretty-printed), replacing the file atomically."""
        path = Path(path)
        entries = [task.to_dict() for task in tasks]
        payload = json.dumps(entries, indent=JSON_INDENT, ensure_ascii=False)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix='.tmp')
        except OSError as exc:
            raise StorageError(f"error creating file {path}: {exc.strerror or exc}") from exc
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, _target_mode(path))
            os.replace(tmp_name, path)
        except OSError as exc:
            _discard(tmp_name)
            raise StorageError(f"error writing to file {path}: {exc.strerror or exc}") from exc
        logger.debug("saved %d task(s) to %s", len(entries), path)

    @staticmethod
    def init_store(path: PathLike, force: bool = False) -> bool:
        """Create an empty task file. Returns False if one already exists and
        ``force`` is not set; the existing file is left untouched then."""
        path = Path(path)
        if path.exists() and not force:
            logger.debug("store %s already exists; not initializing", path)
            return False
        Storage.save_tasks(path, [])
        logger.info("initialized empty task store at %s", path)
        return True


def _target_mode(path: Path) -> int:
    """Permission bits the saved file should carry: the existing file's, or
    the umask default for a new one (mkstemp alone would give 0600)."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _discard(tmp_name: str) -> None:
    """Best-effort removal of a temp file left behind by a failed save."""
    try:
        os.unlink(tmp_name)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("could not remove temporary file %s: %s", tmp_name, exc)
