# src/memoboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME = "memoboard.log"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keeps the REPL readable: controller phase tracing under memoboard.tasks
    needs INFO+, other loggers outside memoboard need ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("memoboard.tasks."):
            return record.levelno >= logging.INFO
        if record.name.startswith("memoboard."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/memoboard",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Filtered stderr handler + full file log in <log_dir>/memoboard.log.
    Replaces any handlers already on the root logger. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    file = logging.FileHandler(log_file, encoding="utf-8")
    file.setLevel(file_level)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(logging.DEBUG)
    for h in (console, file):
        h.setFormatter(fmt)
        root.addHandler(h)

    # httpx logs every request at INFO.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
