import logging
from typing import Optional
from rich.logging import RichHandler
from yt_timedtext.config import settings

LOGGER_NAME = "yt_timedtext"

def setup_logger(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (and optionally file) handlers to the package logger.

    Only entry points call this; library code just uses ``logger``.
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level or settings.LOG_LEVEL)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    console = RichHandler(rich_tracebacks=True, show_path=False)
    console.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    log.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        log.addHandler(file_handler)

    log.propagate = False
    return log

def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")

logger = get_logger()
