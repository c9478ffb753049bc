"""
Unit test conftest.py for bedrock-pipeline.
"""

import logging


def pytest_configure(config):
    """Let tests capture debug records from the package loggers."""
    logging.getLogger('bedrock_pipeline').setLevel(logging.DEBUG)
