"""Logging setup for the leverage_optimizer logger tree.

Modules log through ``get_logger(<module>)``, a child of the
``leverage_optimizer`` logger. Nothing is configured at import time: the
command-line scripts call ``configure_logging`` once with the ``logging``
section of the YAML config, or ``setup_logging`` directly.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "leverage_optimizer"

DEFAULT_LEVEL = "WARNING"
CONSOLE_FORMAT = '%(levelname)-7s %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _resolve_level(log_level) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    return level


def setup_logging(
    log_level: str = DEFAULT_LEVEL,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """Attach handlers to the package logger, replacing any previous ones.

    Console output goes to stderr so it never mixes with the printed report.
    The file handler, when requested, always carries timestamps and source
    locations.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL) or number
        log_file: Optional log file path; parent directories are created
        log_format: Optional format for the console handler

    Returns:
        The configured ``leverage_optimizer`` logger

    Raises:
        ValueError: If log_level is not a known level name

    Example:
        >>> logger = setup_logging(log_level="DEBUG", log_file="logs/optimizer.log")
        >>> logger.info("Optimizing %d contracts", 54)
    """
    level = _resolve_level(log_level)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(log_format or CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode='a')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def configure_logging(config: Dict[str, Any], level_override: Optional[str] = None) -> logging.Logger:
    """Set up logging from the ``logging`` section of a loaded config.

    Args:
        config: Full configuration dictionary (see utils.config.load_config)
        level_override: Level from the command line; wins over the config

    Returns:
        The configured ``leverage_optimizer`` logger
    """
    section = config.get('logging') or {}
    return setup_logging(
        log_level=level_override or section.get('level') or DEFAULT_LEVEL,
        log_file=section.get('file'),
        log_format=section.get('format'),
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module of the package, e.g. ``get_logger("optimizer")``."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
