"""
Pydantic models for the bedrock config file.
"""
from typing import Dict, Any, Optional
from pydantic import BaseModel


class AzureDevOpsConfig(BaseModel):
    """The azure_devops section of the config file."""
    org: Optional[str] = None
    project: Optional[str] = None
    access_token: Optional[str] = None


class BedrockConfig(BaseModel):
    """Top level config file."""
    azure_devops: AzureDevOpsConfig = AzureDevOpsConfig()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BedrockConfig':
        """Create BedrockConfig from dictionary."""
        # Empty sections parse as None in YAML
        return cls(**{k: v for k, v in (data or {}).items() if v is not None})
