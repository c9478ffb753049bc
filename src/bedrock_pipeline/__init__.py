"""
bedrock-pipeline: provision Azure DevOps pipelines for bedrock managed services.
"""

__version__ = '0.1.0'
