"""
Centralized logging configuration.

This module provides a bootstrap_logging function used by the CLI entry point
to configure logging consistently using Python's native INI format.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

VALID_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

PACKAGED_CONFIG = Path(__file__).parent / 'logging.ini'


def _find_logging_config() -> Optional[Path]:
    """
    Find the logging configuration file.

    Looks for logging.ini in the current working directory, then falls back
    to the copy shipped with the package.

    Returns:
        Path to logging configuration file, or None if not found.
    """
    current_dir_config = Path('logging.ini')
    if current_dir_config.exists():
        return current_dir_config

    if PACKAGED_CONFIG.exists():
        return PACKAGED_CONFIG

    return None


def _setup_environment_variables():
    """
    Set LOG_LEVEL to INFO if not already set, ensuring the INI file has a valid value.
    """
    if 'LOG_LEVEL' not in os.environ:
        os.environ['LOG_LEVEL'] = 'INFO'

    log_level = os.environ['LOG_LEVEL'].strip().upper()
    if log_level not in VALID_LEVELS:
        print(f"Warning: Invalid LOG_LEVEL '{log_level}', using INFO", file=sys.stderr)
        os.environ['LOG_LEVEL'] = 'INFO'


def _apply_level(level: str) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setLevel(getattr(logging, level))
    logging.getLogger('bedrock_pipeline').setLevel(getattr(logging, level))


def bootstrap_logging(verbose: bool = False) -> None:
    """
    Bootstrap logging configuration for the CLI.

    This function:
    1. Sets up environment variables for INI file substitution
    2. Loads logging configuration from logging.ini using logging.config.fileConfig()
    3. Applies the LOG_LEVEL environment variable override after loading
    4. Forces DEBUG when verbose is set

    Args:
        verbose: Enable debug output regardless of LOG_LEVEL
    """
    _setup_environment_variables()

    config_path = _find_logging_config()

    if config_path is None:
        logging.basicConfig(
            level=logging.INFO,
            format='%(levelname)s: %(name)s: %(message)s',
            stream=sys.stderr
        )
        _apply_level('DEBUG' if verbose else os.environ['LOG_LEVEL'].strip().upper())
        return

    try:
        logging.config.fileConfig(
            str(config_path),
            disable_existing_loggers=False
        )
    except Exception as e:
        print(f"Warning: Failed to load logging config from {config_path}: {e}", file=sys.stderr)
        print("Using basic logging configuration", file=sys.stderr)
        logging.basicConfig(
            level=logging.INFO,
            format='%(levelname)s: %(name)s: %(message)s',
            stream=sys.stderr
        )

    _apply_level('DEBUG' if verbose else os.environ['LOG_LEVEL'].strip().upper())
    logging.getLogger(__name__).debug(f"Logging configured from {config_path}")


def mask_secret(value: Optional[str]) -> str:
    """Render a secret for log output without exposing it."""
    if not isinstance(value, str) or not value:
        return repr(value)
    if len(value) <= 4:
        return '****'
    return f"****{value[-4:]}"
