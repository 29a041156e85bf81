"""Logging setup for AllerScan, driven by the ``logging`` config section."""

import logging
import sys
from pathlib import Path

from allerscan.utils.config import LoggingConfig

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-region OCR text goes to this logger at DEBUG
DIAGNOSTICS_LOGGER = "allerscan.diagnostics"


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure the ``allerscan`` logger tree from the config.

    Args:
        config: Logging section of the app config; defaults when omitted.

    Returns:
        The configured ``allerscan`` logger.
    """
    config = config or LoggingConfig()

    logger = logging.getLogger("allerscan")
    logger.setLevel(_level(config.level))
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if config.console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode="a")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # The UI debug panel subscribes to the channel directly, so this only
    # controls how much of the scan chatter reaches the console and file
    logging.getLogger(DIAGNOSTICS_LOGGER).setLevel(_level(config.diagnostics_level))

    # Tesseract and Pillow are chatty at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("pytesseract").setLevel(logging.WARNING)

    return logger


def get_logger(name: str = "allerscan") -> logging.Logger:
    return logging.getLogger(name)
