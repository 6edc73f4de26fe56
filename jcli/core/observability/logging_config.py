"""
Logging configuration — set up once by the root ``j`` group.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
what is configured here.  Log records are diagnostics only: everything
the user is meant to read goes through ``jcli.ui.cli.output``.

Level precedence:
    --debug  >  --verbose  >  --quiet  >  J_LOG_LEVEL  >  WARNING

File output is opt-in through J_LOG_FILE / J_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

# ── Format strings ──────────────────────────────────────────────

_FMT_MINIMAL = "%(message)s"

_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(threadName)s: %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Library loggers that chatter below WARNING
_NOISY_LOGGERS = ("urllib3", "asyncio", "concurrent.futures")

ENV_LOG_LEVEL = "J_LOG_LEVEL"
ENV_LOG_FILE = "J_LOG_FILE"
ENV_LOG_FILE_LEVEL = "J_LOG_FILE_LEVEL"


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def configure_cli_logging(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Root-group entry: global flags plus the ``J_LOG_*`` variables."""
    env = os.environ if environ is None else environ
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=env.get(ENV_LOG_LEVEL),
        ),
        log_file=env.get(ENV_LOG_FILE) or None,
        log_file_level=env.get(ENV_LOG_FILE_LEVEL) or None,
        quiet_third_party=not debug,
    )


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path; ``~`` is expanded and missing
            parent directories are created.  A file that cannot be
            opened is reported once on the console and skipped.
        log_file_level: Level for the log file, defaults to ``level``.
        quiet_third_party: Keep library loggers at WARNING unless the
            console level is DEBUG.
    """
    numeric_level = _parse_level(level)

    # Console goes to stderr so ``--json`` output on stdout stays parseable
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(numeric_level)

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        handler = _file_handler(Path(log_file).expanduser(), file_level)
        if handler is not None:
            root.addHandler(handler)
            # Root must pass records the file wants even if the console drops them
            root.setLevel(min(numeric_level, file_level))

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # A broken log stream must never fail a command
    logging.raiseExceptions = False


def _file_handler(path: Path, level: int) -> logging.Handler | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("%s ignored, cannot open %s: %s", ENV_LOG_FILE, path, e)
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant, WARNING for anything unknown."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.strip().upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
