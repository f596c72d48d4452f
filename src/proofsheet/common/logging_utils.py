"""
Logging setup for the conversion service and scripts.

Library modules only create module loggers; handlers are installed once by
the process entry point.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """
    Attach a stream handler (and optionally a rotating file handler).

    Calling this twice does not stack duplicate handlers.

    Args:
        level: Logging level name or number.
        log_file: Optional path for a rotating log file.
        logger_name: Logger to configure. None = root logger.

    Returns:
        The configured logger.

    Example:
        >>> configure_logging("DEBUG", Path("workspace/logs/upload.log"))
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(getattr(h, "_proofsheet", False) for h in logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        stream._proofsheet = True
        logger.addHandler(stream)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        already = any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == os.path.abspath(log_file)
            for h in logger.handlers
        )
        if not already:
            file_handler = RotatingFileHandler(
                log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
