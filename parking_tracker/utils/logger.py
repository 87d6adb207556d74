# parking_tracker/utils/logger.py
"""
Centralised logging configuration for the entire application.
Logs to console and to a rotating file in /logs/.
Every line carries the snapshot slot the process writes to, so logs from
several lots sharing one database can be told apart.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from parking_tracker.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = settings.LOG_DIR or os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(slot)s | %(name)s | %(message)s"

_configured = False


class SlotFilter(logging.Filter):
    """Stamps `record.slot` with the configured snapshot slot (third-party records included)."""

    def __init__(self, slot: str = None):
        super().__init__()
        self.slot = slot or settings.SNAPSHOT_SLOT

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "slot"):
            record.slot = self.slot
        return True


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    slot_filter = SlotFilter()

    # Console handler
    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(fmt)
    console.addFilter(slot_filter)

    # Rotating file handler, one file per slot — keeps last 10 × 5MB log files
    os.makedirs(LOG_DIR, exist_ok=True)
    file_handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, f"parking-{slot_filter.slot}.log"),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(LOG_LEVEL)
    file_handler.setFormatter(fmt)
    file_handler.addFilter(slot_filter)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
