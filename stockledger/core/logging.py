# stockledger/core/logging.py
import logging
from typing import Optional

from stockledger.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the process-wide log level and format once."""
    global _configured
    if _configured:
        return
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)
    _configured = True
