"""
Root pytest configuration for bedrock-pipeline.
"""

import pytest


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point BEDROCK_CONFIG at a file that does not exist unless a test writes it."""
    monkeypatch.setenv("BEDROCK_CONFIG", str(tmp_path / "config.yaml"))
    yield
