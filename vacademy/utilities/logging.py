"""Logging setup.

Console logging with a single structured format. Modules obtain their
logger with logging.getLogger(__name__) and tag messages with a bracketed
component name, e.g. "[RESOLVER] ...".
"""

import logging

from vacademy.config import Config

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s:%(lineno)d] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once.

    Args:
        level: Log level name (DEBUG, INFO, ...). Defaults to Config.LOG_LEVEL.
    """
    global _configured
    if _configured:
        return

    log_level = getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    # Per-request lines from the HTTP client are too chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _configured = True
