"""
Per-run log file that mirrors everything the package logs to the console.
"""

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "acasched"


def log_file_name(action_label: str, prefix: str = "ContainerApps", now: Optional[datetime] = None) -> str:
    """
    Build the log file name for a run: ``<prefix>_<Action>_<yyyyMMdd_HHmmss>.log``.

    With an empty prefix the name is ``<Action>_<yyyyMMdd_HHmmss>.log``.
    """
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    parts = [prefix, action_label, stamp] if prefix else [action_label, stamp]
    return "_".join(parts) + ".log"


@contextmanager
def run_log(
    action_label: str,
    log_dir: Union[str, Path] = ".",
    prefix: str = "ContainerApps",
    now: Optional[datetime] = None,
    console: bool = True,
) -> Iterator[Path]:
    """
    Attach a file handler and a stderr console handler to the package logger.

    Stdout is left free for machine-readable output. Handlers are detached
    and closed when the block exits.

    Args:
        action_label: Action name used in the file name (e.g. "Stop")
        log_dir: Directory for the log file
        prefix: File name prefix
        now: Timestamp for the file name (defaults to the current time)
        console: Whether to mirror log lines to stderr

    Yields:
        Path of the log file
    """
    log_path = Path(log_dir) / log_file_name(action_label, prefix, now)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    handlers = [file_handler]
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    previous_level = package_logger.level
    package_logger.setLevel(logging.INFO)
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    try:
        yield log_path
    finally:
        for handler in handlers:
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.setLevel(previous_level)
