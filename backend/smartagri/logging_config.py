"""Logging configuration for the SmartAgri backend."""

import logging
from datetime import datetime
from pathlib import Path

from smartagri.config import LOG_DIR, LOG_LEVEL

# Libraries that log every request or statement at INFO
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "openai",
    "anthropic",
    "uvicorn.access",
    "sqlalchemy.engine",
)

_configured = False


def setup_logging() -> None:
    """Send logs to a dated file under LOG_DIR and to the console. Safe to call twice."""
    global _configured
    if _configured:
        return

    logs_dir = Path(LOG_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"smartagri-{datetime.now().strftime('%Y-%m-%d')}.log"

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.FileHandler(log_file), logging.StreamHandler()]
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    logging.getLogger(__name__).info(f"Logging initialized at {logging.getLevelName(level)}: {log_file}")
