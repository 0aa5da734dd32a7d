"""
Structured logging setup for the activity cleaner.
"""
import logging
import sys
from datetime import datetime

# Import settings with fallback for path issues
try:
    from config import settings
except ImportError:
    # Fallback if config not in path
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).parent.parent.parent))
    from config import settings

LOGGER_NAME = "activity_cleaner"


def setup_logging(log_level: str = None) -> logging.Logger:
    """
    Set up logging with a console handler and a per-run log file.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Defaults to settings.LOG_LEVEL

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = settings.LOG_LEVEL

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Clear any existing handlers
    logger.handlers.clear()

    log_format = logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    # File gets everything, including per-step debug output
    log_file = settings.LOG_DIR / f"cleaner_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(log_format)
    logger.addHandler(file_handler)

    logger.info(f"Logging initialized. Log file: {log_file}")
    logger.debug(f"Log level: {log_level}")

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance under the cleaner's logger hierarchy.

    Module names such as ``src.deletion.action_executor`` are nested under
    ``activity_cleaner`` so that handlers installed by setup_logging() apply.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
