"""Pipeline module for bedrock managed services.

Provides the create-pipeline task, which registers an Azure DevOps build
definition for a service and queues its first build.
"""

import logging
import sys
from typing import Any, Callable, Dict, Optional

from invoke import task

from bedrock_pipeline.config.exceptions import (
    ConfigException,
    GitLookupError,
    PipelineDefinitionError,
    PipelineInputError,
)
from bedrock_pipeline.config.loading import load_config
from bedrock_pipeline.config.logging import bootstrap_logging, mask_secret
from bedrock_pipeline.git import get_origin_url, get_repository_name, get_repository_url
from bedrock_pipeline.pipelines.azdo import build_results_url
from bedrock_pipeline.pipelines.client import (
    create_pipeline_for_definition,
    get_build_api_client,
    queue_build,
)
from bedrock_pipeline.pipelines.definitions import (
    definition_for_azure_repo_pipeline,
    yaml_file_path,
)
from bedrock_pipeline.pipelines.models import AzureRepoPipelineConfig

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "master"

# Checked in this order; the first failure is reported.
REQUIRED_INPUTS = [
    ('pipeline_name', '--pipeline-name'),
    ('personal_access_token', '--personal-access-token'),
    ('org_name', '--org-name'),
    ('repo_name', '--repo-name'),
    ('repo_url', '--repo-url'),
    ('devops_project', '--devops-project'),
]


def resolve_inputs(service_name: str, options: Dict[str, Any], config=None,
                   origin_url_lookup: Callable[[], str] = get_origin_url) -> Dict[str, Any]:
    """
    Fill in options that were not given on the command line.

    Org, token and project fall back to the azure_devops config section;
    repo name and URL fall back to the git origin remote; pipeline name
    defaults to <service-name>-pipeline. Values that cannot be resolved stay
    None and are reported by validate_inputs.
    """
    azure_devops = config.azure_devops if config else None
    resolved = dict(options)

    if resolved.get('org_name') is None and azure_devops:
        resolved['org_name'] = azure_devops.org
    if resolved.get('personal_access_token') is None and azure_devops:
        resolved['personal_access_token'] = azure_devops.access_token
    if resolved.get('devops_project') is None and azure_devops:
        resolved['devops_project'] = azure_devops.project
    if resolved.get('pipeline_name') is None:
        resolved['pipeline_name'] = f"{service_name}-pipeline"

    if resolved.get('repo_name') is None or resolved.get('repo_url') is None:
        try:
            origin_url = origin_url_lookup()
            if resolved.get('repo_name') is None:
                resolved['repo_name'] = get_repository_name(origin_url)
            if resolved.get('repo_url') is None:
                resolved['repo_url'] = get_repository_url(origin_url)
        except GitLookupError as e:
            logger.debug(f"Could not derive repository details from git: {e}")

    resolved.setdefault('packages_dir', None)
    return resolved


def validate_inputs(inputs: Dict[str, Any]) -> None:
    """
    Ensure every required option is a string.

    Raises:
        PipelineInputError: Naming the first option that is not a string
    """
    for key, flag in REQUIRED_INPUTS:
        value = inputs.get(key)
        if not isinstance(value, str):
            raise PipelineInputError(
                f"{flag} must be of type 'string', {type(value).__name__} given.",
                flag=flag
            )


def install_pipeline(service_name: str, org_name: str, personal_access_token: str,
                     pipeline_name: str, repository_name: str, repository_url: str,
                     project: str, packages_dir: Optional[str] = None,
                     exit_fn: Callable[[int], Any] = sys.exit):
    """
    Install a pipeline for the service in an Azure DevOps org.

    Args:
        service_name: Service this pipeline belongs to; only used with
            packages_dir to locate the azure-pipelines.yaml file
        org_name: Azure DevOps organization
        personal_access_token: PAT used to authenticate
        pipeline_name: Name of the build definition to create
        repository_name: Repository name in Azure DevOps
        repository_url: Repository URL
        project: Azure DevOps project
        packages_dir: Mono-repository directory containing the service;
            None for a standard service repository
        exit_fn: Called with 1 when a service call fails

    Returns:
        The queued Build, or whatever exit_fn returns on failure
    """
    try:
        devops_client = get_build_api_client(org_name, personal_access_token)
        logger.info("Fetched DevOps Client")
    except Exception as e:
        logger.error(e)
        return exit_fn(1)

    definition = definition_for_azure_repo_pipeline(AzureRepoPipelineConfig(
        branch_filters=[DEFAULT_BRANCH],
        maximum_concurrent_builds=1,
        pipeline_name=pipeline_name,
        repository_name=repository_name,
        repository_url=repository_url,
        yaml_file_branch=DEFAULT_BRANCH,
        yaml_file_path=yaml_file_path(service_name, packages_dir),
    ))

    try:
        logger.debug(f"Creating pipeline for project '{project}' with definition '{definition.as_dict()}'")
        built_definition = create_pipeline_for_definition(devops_client, project, definition)
    except Exception as e:
        logger.error(f"Error occurred during pipeline creation for {pipeline_name}")
        logger.error(e)
        return exit_fn(1)

    if getattr(built_definition, 'id', None) is None:
        raise PipelineDefinitionError(
            f"Invalid BuildDefinition created, parameter 'id' is missing from {built_definition!r}",
            pipeline_name=pipeline_name
        )

    logger.info(f"Created pipeline for {pipeline_name}")
    logger.info(f"Pipeline ID: {built_definition.id}")

    try:
        build = queue_build(devops_client, project, built_definition.id)
    except Exception as e:
        logger.error(f"Error occurred when queueing build for {pipeline_name}")
        logger.error(e)
        return exit_fn(1)

    build_id = getattr(build, 'id', None)
    if build_id is not None:
        logger.info(f"Queued build {build_id}: {build_results_url(org_name, project, build_id)}")
    return build


@task(aliases=['p'], auto_shortflags=False, help={
    'service_name': 'Name of the service the pipeline is created for',
    'pipeline_name': 'Name of the pipeline to be created (default: <service-name>-pipeline)',
    'personal_access_token': 'Personal Access Token',
    'org_name': 'Organization Name for Azure DevOps',
    'repo_name': 'Repository Name in Azure DevOps',
    'repo_url': 'Repository URL',
    'devops_project': 'Azure DevOps Project',
    'packages_dir': "The mono-repository directory containing this service definition. "
                    "ie. '--packages-dir packages' if my-service is located under ./packages/my-service. "
                    "Omitting this option implies this is not a mono-repository.",
    'verbose': 'Enable debug logging',
})
def create_pipeline(ctx, service_name, pipeline_name=None, personal_access_token=None,
                    org_name=None, repo_name=None, repo_url=None, devops_project=None,
                    packages_dir=None, verbose=False):
    """
    Configure Azure DevOps for a bedrock managed service.

    Examples:
        bedrock create-pipeline my-service --org-name=myorg --devops-project=myproject
        bedrock create-pipeline my-service --packages-dir=packages
    """
    bootstrap_logging(verbose=verbose)

    try:
        config = load_config()
    except ConfigException as e:
        print(e.guidance, file=sys.stderr)
        sys.exit(1)

    inputs = resolve_inputs(service_name, {
        'pipeline_name': pipeline_name,
        'personal_access_token': personal_access_token,
        'org_name': org_name,
        'repo_name': repo_name,
        'repo_url': repo_url,
        'devops_project': devops_project,
        'packages_dir': packages_dir,
    }, config, get_origin_url)

    for key, value in inputs.items():
        shown = mask_secret(value) if key == 'personal_access_token' else value
        logger.debug(f"{key}: {shown}")

    try:
        validate_inputs(inputs)
    except PipelineInputError as e:
        logger.error(f"Error occurred validating inputs for {service_name}")
        logger.error(e)
        print(e.guidance, file=sys.stderr)
        sys.exit(1)

    try:
        install_pipeline(
            service_name,
            inputs['org_name'],
            inputs['personal_access_token'],
            inputs['pipeline_name'],
            inputs['repo_name'],
            inputs['repo_url'],
            inputs['devops_project'],
            inputs['packages_dir'],
            sys.exit
        )
    except Exception as e:
        logger.error(f"Error occurred installing pipeline for {service_name}")
        logger.error(e)
        sys.exit(1)
