"""Shared fixtures for the test suite.

All tests run with zero network access: GitHub and the LLM providers are
replaced by ``httpx.MockTransport`` handlers or in-memory fakes.
"""

from __future__ import annotations

import pytest

from readme_generator.infrastructure.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any ``.env`` file in the working directory."""
    return Settings(_env_file=None)
