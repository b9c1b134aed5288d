from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_LEVEL_ENV = "REGEN_MONITOR_LOG_LEVEL"


def configure_logging(level: str = "INFO") -> None:
    resolved = os.getenv(LOG_LEVEL_ENV) or level
    logging.basicConfig(level=resolved.upper(), format=LOG_FORMAT)
