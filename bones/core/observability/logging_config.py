"""
Logging configuration — diagnostics for both CLI front-ends.

Configured once per process by ``setup_from_flags``. Modules log through
``logging.getLogger(__name__)`` and never print.

Console level, first match wins:
    --debug → DEBUG,  --verbose → INFO,  --quiet → ERROR,
    else $BONES_LOG_LEVEL, else WARNING

$BONES_LOG_FILE adds a file handler at $BONES_LOG_FILE_LEVEL (default:
the console level). What the user is meant to read goes through the
status sink instead, so WARNING-level logging stays silent on a normal run.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "BONES_LOG_LEVEL"
LOG_FILE_ENV = "BONES_LOG_FILE"
LOG_FILE_LEVEL_ENV = "BONES_LOG_FILE_LEVEL"

# (format, datefmt) per console level; the file always gets the detailed one
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_PLAIN_FORMAT = ("%(levelname)s: %(message)s", None)
_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install the console handler (and optionally a file handler) on the root logger.

    Replaces any handlers already present, so calling it twice does not
    duplicate output.

    Args:
        level: Console level name. Unknown names mean WARNING.
        log_file: Path of an extra log file, appended to.
        log_file_level: Level for the file. Defaults to ``level``.
    """
    console_level = _parse_level(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_console_handler(console_level))

    lowest = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root.addHandler(_file_handler(log_file, file_level))
        lowest = min(lowest, file_level)

    root.setLevel(lowest)

    # A closed or broken stream must not turn into a traceback mid-run
    logging.raiseExceptions = False


def setup_from_flags(debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging from CLI flags plus the BONES_LOG_* environment."""
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _PLAIN_FORMAT
    for threshold in sorted(_CONSOLE_FORMATS):
        if level <= threshold:
            fmt, datefmt = _CONSOLE_FORMATS[threshold]
            break

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(*_FILE_FORMAT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; anything unrecognised is WARNING."""
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
