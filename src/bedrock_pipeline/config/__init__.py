"""
Configuration, logging and error types for bedrock commands.
"""

from .exceptions import (
    PipelineException,
    ConfigException,
    PipelineInputError,
    GitLookupError,
    PipelineCreationError,
    PipelineDefinitionError,
    BuildQueueError,
)
from .models import AzureDevOpsConfig, BedrockConfig
from .loading import load_config, default_config_path


__all__ = [
    'PipelineException',
    'ConfigException',
    'PipelineInputError',
    'GitLookupError',
    'PipelineCreationError',
    'PipelineDefinitionError',
    'BuildQueueError',
    'AzureDevOpsConfig',
    'BedrockConfig',
    'load_config',
    'default_config_path',
]
