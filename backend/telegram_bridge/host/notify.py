"""Notifier that surfaces bridge notices through the application log."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class LoggingNotifier:
    """Used when the bridge runs standalone, without a host UI."""

    def notify(self, message: str, severity: str = "info", duration: Optional[int] = None) -> None:
        level = _LEVELS.get(severity, logging.INFO)
        logger.log(level, f"[{severity}] {message}")
