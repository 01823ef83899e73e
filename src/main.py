"""Main entry point for the task tracker."""
import logging
import sys
from typing import Optional, Sequence

from cli import CLI
from config import load_settings

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, stream=sys.stderr)
    return CLI(settings).run(argv)

if __name__ == "__main__":
    sys.exit(main())
