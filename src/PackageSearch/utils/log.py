"""PackageSearch logging utilities.

Provides a single package logger with a timestamp + abbreviated level prefix,
and centralizes logger initialization.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final


_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("PackageSearch")


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
    keep: int = 20,
) -> None:
    """Configure the PackageSearch logger.

    Uses format: mm-dd HH:MM:SS [<LVL>] <message>
    where LVL is one of: DEBG/INFO/WARN/ERRO.

    Console output goes to stderr so that command output on stdout stays
    machine-readable. With ``log_to_file`` each invocation writes
    ``<log_dir>/<action>/<action>_<timestamp>.log`` at debug level, and only
    the newest ``keep`` files of that action are retained.

    Args:
        level: Logging level for the console (e.g., INFO, DEBUG).
        action: CLI action name used to create the log file path.
        log_to_file: Whether to mirror logs to a file.
        log_dir: Base directory for log files.
        keep: Log files kept per action; 0 keeps all of them.
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    formatter = _AbbrevLevelFormatter(
        fmt="%(asctime)s [%(levelabbr)s] %(message)s",
        datefmt="%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = [_console_handler(resolved_level, formatter)]
    if log_to_file and action:
        handlers.append(_file_handler(Path(log_dir or "log") / action, action, keep, formatter))

    for handler in log.handlers:
        handler.close()
    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(min(logging.DEBUG, resolved_level))
    log.propagate = False


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(action_dir: Path, action: str, keep: int, formatter: logging.Formatter) -> logging.Handler:
    action_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    path = action_dir / f"{action}_{timestamp}.log"
    prune_logs(action_dir, action, keep=keep, reserve=0 if path.exists() else 1)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def prune_logs(action_dir: Path, action: str, *, keep: int, reserve: int = 0) -> list[Path]:
    """Delete the oldest log files of ``action`` beyond ``keep``.

    Args:
        action_dir: Directory holding the action's log files.
        action: CLI action name; only ``<action>_*.log`` files are touched.
        keep: Number of files to retain; 0 disables pruning.
        reserve: Slots held back for files about to be created.

    Returns:
        The deleted paths, oldest first.
    """
    if keep <= 0:
        return []
    # Timestamps are zero-padded, so name order is age order.
    existing = sorted(action_dir.glob(f"{action}_*.log"))
    excess = len(existing) + reserve - keep
    removed = existing[: max(excess, 0)]
    for path in removed:
        path.unlink(missing_ok=True)
    return removed
