"""
Azure DevOps build API calls.

Thin wrappers over the azure-devops SDK build client: connect with a personal
access token, create a build definition, queue a build against it.
"""

import logging

from azure.devops.connection import Connection
from azure.devops.v7_0.build.models import Build, BuildDefinition, DefinitionReference
from msrest.authentication import BasicAuthentication

from ..config.exceptions import BuildQueueError, PipelineCreationError
from .azdo import azdo_url

logger = logging.getLogger(__name__)


def personal_access_token_handler(token: str) -> BasicAuthentication:
    """PAT authentication: empty user name, token as password."""
    return BasicAuthentication('', token)


def init_build_api_client(token_handler, connection_cls, org_name: str, token: str):
    """
    Build an Azure DevOps build client from injectable parts.

    Args:
        token_handler: Callable turning a token into msrest credentials
        connection_cls: Connection class taking base_url and creds
        org_name: Azure DevOps organization name
        token: Personal access token
    """
    credentials = token_handler(token)
    connection = connection_cls(base_url=azdo_url(org_name), creds=credentials)
    return connection.clients.get_build_client()


def get_build_api_client(org_name: str, personal_access_token: str):
    """Get an Azure DevOps build client for an organization."""
    return init_build_api_client(
        personal_access_token_handler,
        Connection,
        org_name,
        personal_access_token
    )


def create_pipeline_for_definition(build_api, azdo_project: str,
                                   definition: BuildDefinition) -> BuildDefinition:
    """
    Create a pipeline on Azure DevOps.

    Args:
        build_api: Build client for Azure DevOps
        azdo_project: Project within the authenticated organization
        definition: BuildDefinition to create

    Returns:
        The BuildDefinition created by the service

    Raises:
        PipelineCreationError: If the service call fails or returns nothing
    """
    logger.info("Creating pipeline for definition")

    try:
        logger.debug(f"Creating BuildDefinition based on {definition.as_dict()}")
        created = build_api.create_definition(definition, azdo_project)
        if not created:
            raise PipelineCreationError(
                f"Error creating BuildDefinition; create_definition() returned an invalid value of {created!r}"
            )
        return created
    except Exception as e:
        logger.error(e)
        raise PipelineCreationError("Error creating definition") from e


def queue_build(build_api, azdo_project: str, definition_id: int) -> Build:
    """
    Queue a build on a pipeline.

    Raises:
        BuildQueueError: If the service call fails
    """
    build_reference = Build(definition=DefinitionReference(id=definition_id))

    try:
        return build_api.queue_build(build_reference, azdo_project)
    except Exception as e:
        logger.error(e)
        raise BuildQueueError("Error queueing build") from e
