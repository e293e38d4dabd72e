"""Log setup for the API server and the interactive CLI."""

import logging
import sys
from typing import TextIO

LOG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'

# Loggers that are too chatty at the application level
_QUIET_LOGGERS = ('sqlalchemy.engine', 'uvicorn.access')


def parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(level: int | str = logging.INFO, stream: TextIO = sys.stderr) -> None:
    """Replace any root handlers with one writing to `stream`.

    Records go to stderr by default so they never mix with CLI replies.
    """
    level = parse_level(level)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=stream, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
