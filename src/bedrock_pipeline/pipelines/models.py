"""
Pipeline configuration models and Azure DevOps build model extensions.
"""
from enum import Enum
from typing import Dict, List, Optional

from azure.devops.v7_0.build.models import BuildDefinitionVariable
from msrest.serialization import Model
from pydantic import BaseModel


class RepositoryTypes(str, Enum):
    """Repository provider types understood by Azure DevOps."""
    GITHUB = "github"
    AZURE = "tfsgit"


class ContinuousIntegrationTrigger(Model):
    """CI trigger. BuildDefinition types its triggers as plain objects."""

    _attribute_map = {
        'trigger_type': {'key': 'triggerType', 'type': 'object'},
        'batch_changes': {'key': 'batchChanges', 'type': 'bool'},
        'branch_filters': {'key': 'branchFilters', 'type': '[str]'},
        'max_concurrent_builds_per_branch': {'key': 'maxConcurrentBuildsPerBranch', 'type': 'int'},
        'settings_source_type': {'key': 'settingsSourceType', 'type': 'int'},
    }

    def __init__(self, batch_changes=None, branch_filters=None, max_concurrent_builds_per_branch=None,
                 settings_source_type=None, trigger_type='continuousIntegration'):
        super(ContinuousIntegrationTrigger, self).__init__()
        self.trigger_type = trigger_type
        self.batch_changes = batch_changes
        self.branch_filters = branch_filters
        self.max_concurrent_builds_per_branch = max_concurrent_builds_per_branch
        self.settings_source_type = settings_source_type


class YamlProcess(Model):
    """Process for definitions driven by a YAML file in the repository."""

    _attribute_map = {
        'type': {'key': 'type', 'type': 'int'},
        'yaml_filename': {'key': 'yamlFilename', 'type': 'str'},
    }

    def __init__(self, yaml_filename=None):
        super(YamlProcess, self).__init__()
        self.type = 2
        self.yaml_filename = yaml_filename


class PipelineVariable(BaseModel):
    """A pipeline variable to seed on the definition."""
    value: str
    is_secret: bool = False
    allow_override: bool = False

    def to_build_variable(self) -> BuildDefinitionVariable:
        return BuildDefinitionVariable(
            value=self.value,
            is_secret=self.is_secret,
            allow_override=self.allow_override,
        )


class AzureRepoPipelineConfig(BaseModel):
    """Pipeline configuration for a repository hosted in Azure Repos."""
    pipeline_name: str
    repository_url: str
    repository_name: str
    yaml_file_branch: str
    yaml_file_path: str
    branch_filters: List[str]
    maximum_concurrent_builds: int
    variables: Optional[Dict[str, PipelineVariable]] = None


class GithubRepoPipelineConfig(AzureRepoPipelineConfig):
    """Pipeline configuration for a repository hosted on GitHub."""
    service_connection_id: str
