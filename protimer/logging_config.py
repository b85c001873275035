import logging
import logging.handlers
from pathlib import Path

from protimer.config import APP_NAME

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level=logging.INFO, log_dir=None) -> logging.Logger:
    """
    Configure the root logger with a console handler and, when log_dir is given,
    a rotating file. Calling it again replaces the handlers instead of stacking them.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "protimer.log"
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch.setLevel(level)
    logger.addHandler(ch)

    logger.info("%s logging initialised (level %s)", APP_NAME, logging.getLevelName(level))
    return logger


def get_logger(name=None) -> logging.Logger:
    """Usage: from protimer.logging_config import get_logger; log = get_logger(__name__)"""
    return logging.getLogger(name or "protimer")
