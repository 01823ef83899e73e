"""Runtime settings for the task tracker.

Values come from the process environment, optionally seeded from a .env
file (real environment variables win over .env entries).

    TASKTRACK_FILE       path of the task file (default: tasks.json in cwd)
    TASKTRACK_LOG_LEVEL  logging level name (default: WARNING)
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_TASKS_FILE = 'tasks.json'
DEFAULT_LOG_LEVEL = 'WARNING'
FILE_VAR = 'TASKTRACK_FILE'
LOG_LEVEL_VAR = 'TASKTRACK_LOG_LEVEL'


@dataclass
class Settings:
    tasks_file: Path
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(env_file: Optional[Union[str, Path]] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    ``env_file`` defaults to ``.env`` in the working directory and is only
    read when it exists. Passing ``environ`` skips .env loading entirely and
    reads from that mapping instead (used by tests).
    """
    if environ is None:
        path = Path(env_file) if env_file is not None else Path.cwd() / '.env'
        if path.exists():
            load_dotenv(path, override=False)
            logger.debug("loaded environment from %s", path)
        environ = os.environ
    tasks_file = Path(environ.get(FILE_VAR) or DEFAULT_TASKS_FILE).expanduser()
    log_level = (environ.get(LOG_LEVEL_VAR) or '').strip().upper() or DEFAULT_LOG_LEVEL
    if not isinstance(logging.getLevelName(log_level), int):
        logger.warning("unknown log level %r in %s; using %s", log_level, LOG_LEVEL_VAR, DEFAULT_LOG_LEVEL)
        log_level = DEFAULT_LOG_LEVEL
    return Settings(tasks_file=tasks_file, log_level=log_level)
