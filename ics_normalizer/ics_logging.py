"""
Central logging configuration for ics_normalizer.

Installs a colorized console handler (colorlog) on the root logger and sets
levels for the package's module loggers. Debug mode can be forced through the
environment for troubleshooting.
"""

import logging
import os
from typing import Optional

from colorlog import ColoredFormatter

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

PACKAGE_LOGGERS = [
    "ics_normalizer",
    "ics_normalizer.component",
    "ics_normalizer.timezone_utils",
    "ics_normalizer.datetime_utils",
    "ics_normalizer.rrule_utils",
    "ics_normalizer.event_parser",
    "ics_normalizer.event_merger",
    "ics_normalizer.validators",
    "ics_normalizer.ics_parser",
    "ics_normalizer.config_loader",
]

# Third-party loggers kept quiet unless everything is reset to DEBUG
NOISY_LOGGERS = {
    "icalendar": logging.INFO,
}

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _is_handler_installed(root: logging.Logger) -> bool:
    return any(isinstance(h.formatter, ColoredFormatter) for h in root.handlers)


def configure_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure logging for ics_normalizer.

    Adds a colorized stream handler to the root logger unless one is already
    installed, so repeated calls never duplicate output.

    Args:
        debug_mode: Whether to enable debug logging for ics_normalizer modules
        force_debug: Override debug mode setting (None to use env var detection)
        log_level: Level name for root and package loggers when debug is off,
            usually ``Config.log_level`` (None or an unknown name means INFO)

    Environment Variables:
        ICS_NORMALIZER_DEBUG: Set to '1', 'true', 'yes', 'on' to force debug logging
        ICS_NORMALIZER_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("ICS_NORMALIZER_DEBUG", "").lower() in ("1", "true", "yes", "on")
    env_log_level = os.getenv("ICS_NORMALIZER_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    configured_level = _LEVELS.get((log_level or "").upper(), logging.INFO)
    root_level = logging.DEBUG if final_debug else configured_level
    if env_log_level in _LEVELS:
        root_level = _LEVELS[env_log_level]

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    if not _is_handler_installed(root_logger):
        handler = logging.StreamHandler()
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=LOG_DATEFMT, log_colors=LOG_COLORS))
        root_logger.addHandler(handler)

    logger_config: dict[str, int] = dict(NOISY_LOGGERS)
    package_level = logging.DEBUG if final_debug else configured_level
    for module in PACKAGE_LOGGERS:
        logger_config[module] = package_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for ics_normalizer modules")
    else:
        root_logger.debug("Logging configured at level %s", logging.getLevelName(root_level))


def reset_logging_to_debug() -> None:
    """
    Reset all loggers to DEBUG level for troubleshooting.

    Includes the third-party loggers that configure_logging keeps quiet.
    """
    logging.getLogger().setLevel(logging.DEBUG)
    for logger_name in [*PACKAGE_LOGGERS, *NOISY_LOGGERS]:
        logging.getLogger(logger_name).setLevel(logging.DEBUG)

    logging.getLogger().info("All loggers reset to DEBUG level for troubleshooting")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ["ics_normalizer", *NOISY_LOGGERS]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
