"""Logging helpers for the console and the per-run transcript file.

`configure_file_logging` attaches a rotating file handler to a set of loggers
and returns the handler so the caller can detach it. `transcript` wraps that in
a context manager so the log file is released on every exit path of a run.
"""
from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from contextlib import contextmanager
from datetime import datetime
from typing import Iterable, Iterator, List, Optional

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def default_log_path(logs_dir: Optional[str] = None) -> str:
    """Build `logs/<script>_<timestamp>.log` next to the package."""
    if logs_dir is None:
        here = os.path.dirname(__file__)
        logs_dir = os.path.abspath(os.path.join(here, "..", "logs"))
    try:
        script_name = os.path.splitext(os.path.basename(sys.argv[0] or "script"))[0]
    except Exception:
        script_name = "script"
    if script_name in ("main", "__main__", ""):
        script_name = "spo_default_label"
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(logs_dir, f"{script_name}_{ts}.log")


def _resolve_level(level: str) -> int:
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def configure_console_logging(level: Optional[str] = None) -> None:
    """Attach a stream handler to the root logger unless one already exists.

    Operator-facing messages are printed by the prompter, so the console only
    shows warnings and errors unless LOG_LEVEL asks for more.
    """
    root = logging.getLogger()
    resolved = _resolve_level(level or os.getenv("LOG_LEVEL", "WARNING"))
    root.setLevel(resolved)
    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        ch.setLevel(resolved)
        root.addHandler(ch)


def configure_file_logging(log_path: Optional[str] = None,
                           *,
                           max_bytes: int = 5 * 1024 * 1024,
                           backup_count: int = 3,
                           logger_names: Optional[Iterable[str]] = None,
                           level: str = "DEBUG") -> logging.Handler:
    """Attach a rotating file handler to the given loggers (or the root logger).

    - The parent directory of `log_path` is created when missing.
    - If a handler for the same file is already attached it is reused.
    - Returns the handler; `detach_file_logging` removes and closes it.
    """
    if not log_path:
        log_path = default_log_path()
    log_path = os.path.abspath(log_path)
    parent = os.path.dirname(log_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    targets: List[logging.Logger] = []
    if logger_names is None:
        targets.append(logging.getLogger())
    else:
        for name in logger_names:
            targets.append(logging.getLogger(name))

    handler: Optional[logging.Handler] = None
    for lg in targets:
        for h in lg.handlers:
            if hasattr(h, "baseFilename") and os.path.abspath(getattr(h, "baseFilename")) == log_path:
                handler = h
                break
    if handler is None:
        handler = logging.handlers.RotatingFileHandler(log_path, maxBytes=max_bytes,
                                                       backupCount=backup_count, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.setLevel(_resolve_level(level))
        # levels to put back in detach_file_logging
        handler.previous_levels = {}

    previous = getattr(handler, "previous_levels", {})
    for lg in targets:
        if handler not in lg.handlers:
            lg.addHandler(handler)
        if lg.getEffectiveLevel() > handler.level:
            previous.setdefault(lg.name, lg.level)
            lg.setLevel(handler.level)

    logging.getLogger(__name__).info("File logging initialized: %s", log_path)
    return handler


def detach_file_logging(handler: logging.Handler,
                        logger_names: Optional[Iterable[str]] = None) -> None:
    targets = [logging.getLogger()] if logger_names is None else [logging.getLogger(n) for n in logger_names]
    previous = getattr(handler, "previous_levels", {})
    for lg in targets:
        lg.removeHandler(handler)
        if lg.name in previous:
            lg.setLevel(previous.pop(lg.name))
    handler.close()


@contextmanager
def transcript(log_path: Optional[str] = None, level: str = "DEBUG") -> Iterator[str]:
    """Record everything logged during the block to `log_path`.

    Yields the absolute log path. The handler is detached and the file closed
    when the block exits, whether it returns, aborts or raises.
    """
    handler = configure_file_logging(log_path, level=level)
    path = getattr(handler, "baseFilename", log_path or "")
    logger = logging.getLogger(__name__)
    logger.info("Transcript started, output file is %s", path)
    try:
        yield path
    finally:
        logger.info("Transcript stopped, output file is %s", path)
        detach_file_logging(handler)
