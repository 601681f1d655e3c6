"""Pytest configuration and fixtures for integration tests.

Loads .env and skips the whole suite unless every API key is configured.
These tests call the live services and consume API quota.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

REQUIRED_KEYS = ("COHERE_API_KEY", "CLARIFAI_API_KEY", "SPOONACULAR_API_KEY")


def pytest_configure(config):
    """Load environment variables from .env in the project root."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip integration tests if required API keys are not configured."""
    missing = [name for name in REQUIRED_KEYS if not os.getenv(name)]
    if missing:
        pytest.skip(
            f"Integration tests skipped. Missing API keys: {', '.join(missing)}. Please set these in your .env file.",
            allow_module_level=True,
        )
