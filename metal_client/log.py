# metal_client/log.py
from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "metal_client"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


def configure_logging(level: str | int = "INFO", log_file: str | Path | None = None) -> logging.Logger:
    """Attach console (and optionally rotating file) handlers to the SDK logger.

    Libraries should not configure logging on import; scripts and apps call
    this once. Calling it again only updates the level.
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(not isinstance(h, logging.NullHandler) for h in log.handlers):
        fmt = logging.Formatter(LOG_FORMAT)

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(fmt)
        log.addHandler(stream_handler)

        if log_file is not None:
            path = Path(log_file)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=5)
                file_handler.setFormatter(fmt)
                log.addHandler(file_handler)
            except OSError as exc:
                log.warning("Failed to initialize file logging at %s: %s", path, exc)

    log.propagate = False
    return log
