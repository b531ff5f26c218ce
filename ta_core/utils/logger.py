"""Logging setup for ta-core, based on loguru."""
import sys
from typing import Optional

from loguru import logger


# Drop loguru's default stderr handler; setup_logger() installs ours.
logger.remove()

_initialized = False


def setup_logger(
    log_file: Optional[str] = "logs/ta_core.log",
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "30 days",
) -> None:
    """Configure console and file logging.

    Args:
        log_file: Log file path, or None to log to the console only
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        rotation: Rotation size for the log file
        retention: How long rotated files are kept
    """
    global _initialized

    if _initialized:
        logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )

    if log_file:
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )

    _initialized = True


def get_logger(name: str):
    """Return a logger bound to a module name.

    Args:
        name: Module name, usually ``__name__``

    Returns:
        loguru logger with ``name`` bound into its extra dict
    """
    return logger.bind(name=name)


def setup_logger_from_config(config) -> None:
    """Configure logging from the ``logging:`` section of a Config."""
    setup_logger(
        log_file=config.get("logging.file", "logs/ta_core.log"),
        level=config.get("logging.level", "INFO"),
        rotation=config.get("logging.rotation", "10 MB"),
        retention=config.get("logging.retention", "30 days"),
    )
