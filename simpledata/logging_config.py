import logging
import pathlib
from logging.handlers import TimedRotatingFileHandler
from typing import Optional


def setup_logging(
    log_file: Optional[pathlib.Path] = None,
    log_level: str = 'warning',
) -> logging.Logger:
    """Configure root logger, does nothing if logging is already configured"""
    if log_file:
        # Rotate every day and keep logs for 7 days
        handler = TimedRotatingFileHandler(log_file, when="midnight", interval=1, backupCount=7, delay=True)
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    else:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(levelname)s - %(message)s")
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=logging.getLevelName(log_level.upper()),
        handlers=[handler],
    )

    return logging.getLogger()
