"""
Azure DevOps pipeline provisioning.
"""

from .azdo import azdo_url, build_results_url
from .client import (
    create_pipeline_for_definition,
    get_build_api_client,
    init_build_api_client,
    queue_build,
)
from .definitions import (
    definition_for_azure_repo_pipeline,
    definition_for_github_repo_pipeline,
    yaml_file_path,
)
from .models import (
    AzureRepoPipelineConfig,
    GithubRepoPipelineConfig,
    PipelineVariable,
    RepositoryTypes,
)

__all__ = [
    'azdo_url',
    'build_results_url',
    'create_pipeline_for_definition',
    'get_build_api_client',
    'init_build_api_client',
    'queue_build',
    'definition_for_azure_repo_pipeline',
    'definition_for_github_repo_pipeline',
    'yaml_file_path',
    'AzureRepoPipelineConfig',
    'GithubRepoPipelineConfig',
    'PipelineVariable',
    'RepositoryTypes',
]
