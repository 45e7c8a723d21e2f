"""Console logging shared by the API and the Streamlit app.

Usage:
    from smartfinance.logs import setup_logging
    setup_logging()
    logger = logging.getLogger(__name__)
"""
import logging
import os
import sys
from datetime import datetime

_HANDLER_NAME = "smartfinance-console"


class IsoFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        iso_time = datetime.fromtimestamp(record.created).isoformat()
        base = f"{iso_time} | {record.levelname:<8} | {record.name:<30} | {record.getMessage()}"
        if record.exc_info:
            return f"{base}\n{self.formatException(record.exc_info)}"
        return base


def setup_logging(level: str | None = None) -> logging.Logger:
    root = logging.getLogger()
    resolved = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, resolved, logging.INFO))
    # Streamlit reruns the script on every interaction; add the handler once.
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(IsoFormatter())
        root.addHandler(handler)
    return root
