"""
Build definition payloads for Azure DevOps pipelines.

Maps a high level pipeline configuration onto the vendor's BuildDefinition
schema: CI trigger, hosted agent queue, repository linkage and the location
of the azure-pipelines.yaml file that drives the build.
"""

import posixpath
from typing import Optional

from azure.devops.v7_0.build.models import (
    AgentPoolQueue,
    BuildDefinition,
    BuildRepository,
    TaskAgentPoolReference,
)

from .models import (
    AzureRepoPipelineConfig,
    ContinuousIntegrationTrigger,
    GithubRepoPipelineConfig,
    RepositoryTypes,
    YamlProcess,
)

HOSTED_UBUNTU_POOL = "Hosted Ubuntu 1604"
HOSTED_UBUNTU_POOL_ID = 224

PIPELINE_FILENAME = "azure-pipelines.yaml"


def yaml_file_path(service_name: str, packages_dir: Optional[str] = None) -> str:
    """
    Locate the pipeline YAML file for a service inside its repository.

    A packages directory means a mono-repository, where the file lives at
    <packages-dir>/<service-name>/azure-pipelines.yaml. Otherwise it sits at
    the repository root. Paths are repository paths, so always '/' separated.
    """
    if packages_dir:
        return posixpath.join(packages_dir, service_name, PIPELINE_FILENAME)
    return PIPELINE_FILENAME


def _base_definition(pipeline_config: AzureRepoPipelineConfig,
                     repository: BuildRepository) -> BuildDefinition:
    definition = BuildDefinition(
        badge_enabled=True,
        triggers=[
            ContinuousIntegrationTrigger(
                batch_changes=False,
                branch_filters=list(pipeline_config.branch_filters),
                max_concurrent_builds_per_branch=pipeline_config.maximum_concurrent_builds,
                settings_source_type=2,
            )
        ],
        queue=AgentPoolQueue(
            name=HOSTED_UBUNTU_POOL,
            pool=TaskAgentPoolReference(id=HOSTED_UBUNTU_POOL_ID, name=HOSTED_UBUNTU_POOL),
        ),
        queue_status='enabled',
        name=pipeline_config.pipeline_name,
        type='build',
        quality='definition',
        repository=repository,
        process=YamlProcess(yaml_filename=pipeline_config.yaml_file_path),
    )

    if pipeline_config.variables:
        definition.variables = {
            name: variable.to_build_variable()
            for name, variable in pipeline_config.variables.items()
        }

    return definition


def definition_for_azure_repo_pipeline(pipeline_config: AzureRepoPipelineConfig) -> BuildDefinition:
    """Generate a BuildDefinition for a repository hosted in Azure Repos."""
    repository = BuildRepository(
        default_branch=pipeline_config.yaml_file_branch,
        id=pipeline_config.repository_name,
        name=pipeline_config.repository_name,
        type=RepositoryTypes.AZURE.value,
        url=pipeline_config.repository_url,
    )
    return _base_definition(pipeline_config, repository)


def definition_for_github_repo_pipeline(pipeline_config: GithubRepoPipelineConfig) -> BuildDefinition:
    """Generate a BuildDefinition for a repository hosted on GitHub.

    The GitHub repository is reached through the service connection named by
    service_connection_id.
    """
    repository = BuildRepository(
        default_branch=pipeline_config.yaml_file_branch,
        id=pipeline_config.repository_name,
        name=pipeline_config.repository_name,
        properties={'connectedServiceId': pipeline_config.service_connection_id},
        type=RepositoryTypes.GITHUB.value,
        url=pipeline_config.repository_url,
    )
    return _base_definition(pipeline_config, repository)
