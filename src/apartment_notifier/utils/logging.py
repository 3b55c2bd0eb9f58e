"""Logging configuration for the apartment notifier."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_DIR = "./logs"

# HTTP clients log every webhook post at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def setup_logging(log_level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """
    Configure the root logger for a long-running poller process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Defaults to LOG_LEVEL env var or INFO.
        log_dir: Directory for a daily log file. Defaults to LOG_DIR env var
                 or ./logs; no file is written unless the directory exists.

    Calling this again replaces the handlers installed by the previous call.
    """
    level = log_level or os.getenv("LOG_LEVEL", "INFO")
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]

    log_path = Path(log_dir or os.getenv("LOG_DIR", DEFAULT_LOG_DIR))
    if log_path.is_dir():
        handlers.append(logging.FileHandler(log_path / f"apartment_notifier_{datetime.now():%Y%m%d}.log"))

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
