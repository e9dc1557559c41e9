"""
Centralized logging configuration.

bootstrap_logging() is called from every entry point (the bt program, the
bundled tasks and the test suite) so logging is configured the same way
everywhere, using Python's native INI format.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _find_logging_config() -> Optional[Path]:
    """
    Find the logging configuration file.

    Looks for logging.ini in the current working directory or config/ subdirectory.
    """
    for candidate in (Path('logging.ini'), Path('config/logging.ini')):
        if candidate.exists():
            return candidate
    return None


def _setup_environment_variables():
    """
    Set LOG_LEVEL to INFO if it is not set, so the INI file always has a valid value.
    """
    if 'LOG_LEVEL' not in os.environ:
        os.environ['LOG_LEVEL'] = 'INFO'

    log_level = os.environ['LOG_LEVEL'].strip().upper()
    if log_level not in LOG_LEVELS:
        print(f"Warning: Invalid LOG_LEVEL '{log_level}', using INFO", file=sys.stderr)
        os.environ['LOG_LEVEL'] = 'INFO'


def bootstrap_logging(name: Optional[str] = None) -> None:
    """
    Bootstrap logging configuration using Python's native INI format.

    1. Sets up LOG_LEVEL for INI file substitution
    2. Loads logging.ini with logging.config.fileConfig(), or falls back to basicConfig
    3. Applies the LOG_LEVEL override to the root logger, its stream handlers
       and the buildtypes loggers

    Args:
        name: Optional name for the logger that reports the configuration
    """
    _setup_environment_variables()
    level = getattr(logging, os.environ['LOG_LEVEL'].strip().upper())

    config_path = _find_logging_config()
    if config_path is None:
        logging.basicConfig(
            level=level,
            format='%(levelname)s: %(name)s: %(message)s',
            stream=sys.stderr
        )
    else:
        try:
            logging.config.fileConfig(
                str(config_path),
                defaults={'LOG_LEVEL': os.environ['LOG_LEVEL']},
                disable_existing_loggers=False
            )
        except Exception as e:
            # Fall back to basic configuration if the INI file is invalid
            print(f"Warning: Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            logging.basicConfig(
                level=level,
                format='%(levelname)s: %(name)s: %(message)s',
                stream=sys.stderr
            )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setLevel(level)
    logging.getLogger('buildtypes').setLevel(level)

    logger = logging.getLogger(name) if name else logging.getLogger(__name__)
    logger.debug(f"Logging configured from {config_path or 'defaults'} at {logging.getLevelName(level)}")
