"""
Config file loading for bedrock commands.

The config file is YAML. String values may reference environment variables
as ``${env:NAME}`` so that secrets such as access tokens stay out of the file.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .exceptions import ConfigException
from .models import BedrockConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BEDROCK_CONFIG"

_ENV_REFERENCE = re.compile(r"\$\{env:([^}]+)\}")


def default_config_path() -> Path:
    """Return the config file location, honouring $BEDROCK_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".bedrock" / "config.yaml"


def substitute_env_vars(value: Any) -> Any:
    """Recursively replace ${env:NAME} references with environment values."""
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(lambda m: os.environ.get(m.group(1).strip(), ""), value)
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


def load_config(path: Optional[Path] = None) -> BedrockConfig:
    """
    Load the bedrock config file.

    Args:
        path: Explicit config file; defaults to default_config_path()

    Returns:
        BedrockConfig, empty when the file does not exist

    Raises:
        ConfigException: If the file is not valid YAML or does not match the schema
    """
    config_path = Path(path) if path else default_config_path()
    logger.debug(f"Looking for config at: {config_path}")

    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using empty config")
        return BedrockConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigException(f"Invalid YAML in {config_path}: {e}", path=str(config_path)) from e

    if data is None:
        return BedrockConfig()
    if not isinstance(data, dict):
        raise ConfigException(f"{config_path} must contain a mapping", path=str(config_path))

    try:
        return BedrockConfig.from_dict(substitute_env_vars(data))
    except ValidationError as e:
        raise ConfigException(f"Invalid config in {config_path}: {e}", path=str(config_path)) from e
