import logging
import sys
from logging.handlers import RotatingFileHandler

from wavenote.config import DashboardSettings


def setup_logging(settings: DashboardSettings, max_bytes: int = 10_000_000, backup_count: int = 5) -> logging.Logger:
    """Configure root logging: console plus an optional rotating log file"""
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, settings.LOG_LEVEL))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = logging.Formatter(settings.LOG_FORMAT, datefmt=settings.LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if settings.LOG_TO_FILE:
        settings.LOGS_DIR.mkdir(exist_ok=True, parents=True)
        handler = RotatingFileHandler(
            settings.LOGS_DIR / "wavenote.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if not settings.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return logger
