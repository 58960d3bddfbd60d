"""Logging setup, done once by the CLI at process start."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .config import Config

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(config: Config, stream=None) -> logging.Logger:
    """Configure the ``ccnotify`` logger from config.

    Library modules only create child loggers; handlers and level are set
    here. Calling it again replaces the handlers installed by the previous
    call.
    """
    root = logging.getLogger("ccnotify")
    for handler in list(root.handlers):
        if getattr(handler, "_ccnotify", False):
            root.removeHandler(handler)
            handler.close()

    level = logging.DEBUG if config.debug else logging.WARNING
    root.setLevel(level)

    formatter = logging.Formatter(_FORMAT)

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(formatter)
    console._ccnotify = True  # type: ignore[attr-defined]
    root.addHandler(console)

    log_file = config.resolved_log_file
    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            # Keep logging to stderr only
            root.warning(f"Cannot open log file {log_file}: {e}")
        else:
            file_handler.setFormatter(formatter)
            file_handler._ccnotify = True  # type: ignore[attr-defined]
            root.addHandler(file_handler)

    root.debug(f"Logging configured (debug={config.debug}, log_file={log_file})")
    return root


def get_level_name(logger: Optional[logging.Logger] = None) -> str:
    logger = logger or logging.getLogger("ccnotify")
    return logging.getLevelName(logger.level)
