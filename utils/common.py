"""Logging and trace identifiers for Tether Enabler.

Every module logs through a child of the ``tether_enabler`` logger, so a
single :func:`configure_logging` call sets the level for the whole tree.
Handlers are attached once, to the project logger only; child loggers reach
them by propagation.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator, Optional, Union


PROJECT_LOGGER = "tether_enabler"
LOG_FILE_PREFIX = f"{PROJECT_LOGGER}_"
LOG_DIR_ENV = "TETHER_ENABLER_LOG_DIR"

_NO_TRACE = "-"
_trace_id: ContextVar[str] = ContextVar("tether_trace_id", default=_NO_TRACE)


class TraceIdFilter(logging.Filter):
    """Stamp records with the trace id of the event being handled."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = _trace_id.get()
        return True


def generate_trace_id() -> str:
    return uuid.uuid4().hex


def get_trace_id() -> str:
    return _trace_id.get()


@contextmanager
def trace_id_scope(trace_id: Optional[str]) -> Iterator[None]:
    """Run the block with ``trace_id`` as the active trace id."""
    token = _trace_id.set(trace_id or _NO_TRACE)
    try:
        yield
    finally:
        _trace_id.reset(token)


def log_directory() -> Path:
    """Return where session logs go; ``TETHER_ENABLER_LOG_DIR`` overrides the per-user default."""
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override)
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / PROJECT_LOGGER / "logs"


def prune_logs(logs_dir: Path, today: Optional[str] = None) -> int:
    """Delete session logs from earlier days and return how many went."""
    today = today or dt.date.today().strftime("%Y%m%d")
    removed = 0
    for path in logs_dir.glob(f"{LOG_FILE_PREFIX}*.log"):
        stamp = path.name[len(LOG_FILE_PREFIX):len(LOG_FILE_PREFIX) + 8]
        if len(stamp) != 8 or not stamp.isdigit() or stamp == today:
            continue
        try:
            path.unlink()
            removed += 1
        except OSError as exc:
            logging.getLogger(PROJECT_LOGGER).warning("Could not remove %s: %s", path, exc)
    return removed


def _session_file_handler(logs_dir: Path) -> logging.FileHandler:
    filename = f"{LOG_FILE_PREFIX}{dt.datetime.now():%Y%m%d_%H%M%S}.log"
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(logs_dir / filename, encoding="utf-8")
    except OSError:
        fallback = Path.cwd() / "logs"
        fallback.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(fallback / filename, encoding="utf-8")


def install_handlers(logger: logging.Logger, logs_dir: Path) -> Path:
    """Attach the session file and console handlers to ``logger``.

    Stale logs in ``logs_dir`` are pruned first. Returns the session log path.
    """
    removed = prune_logs(logs_dir) if logs_dir.is_dir() else 0

    file_handler = _session_file_handler(logs_dir)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s %(trace_id)s %(name)-28s %(levelname)-8s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("%(levelname)s [%(trace_id)s] %(name)s: %(message)s"))

    for handler in (file_handler, console_handler):
        handler.addFilter(TraceIdFilter())
        logger.addHandler(handler)

    if removed:
        logger.info("Removed %s old log file(s)", removed)
    return Path(file_handler.baseFilename)


def _project_logger() -> logging.Logger:
    project = logging.getLogger(PROJECT_LOGGER)
    if not project.handlers:
        project.setLevel(logging.INFO)
        log_path = install_handlers(project, log_directory())
        project.info("Log file created: %s", log_path)
    return project


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Return the project logger, or its child logger for ``component``."""
    project = _project_logger()
    return project.getChild(component) if component else project


def resolve_log_level(level: Union[str, int, None]) -> int:
    """Translate a level name (or number) into a logging level, defaulting to INFO."""
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[str, int, None]) -> int:
    """Set the level of the whole project logger tree and return it."""
    resolved = resolve_log_level(level)
    _project_logger().setLevel(resolved)
    return resolved


__all__ = [
    "LOG_FILE_PREFIX",
    "PROJECT_LOGGER",
    "TraceIdFilter",
    "configure_logging",
    "generate_trace_id",
    "get_logger",
    "get_trace_id",
    "install_handlers",
    "log_directory",
    "prune_logs",
    "resolve_log_level",
    "trace_id_scope",
]
