"""Shared fixtures for unit tests.

No test here touches the network: the aiohttp session is a MagicMock and the
tools' request_json is patched per test.
"""

from unittest.mock import MagicMock

import pytest

from kitchen_assistant import KitchenAssistant
from kitchen_assistant.models.models import AssistantSettings


@pytest.fixture
def mock_session() -> MagicMock:
    """Stand-in for an open aiohttp.ClientSession."""
    session = MagicMock()
    session.closed = False
    return session


@pytest.fixture
def settings() -> AssistantSettings:
    return AssistantSettings()


@pytest.fixture
def assistant(mock_session: MagicMock) -> KitchenAssistant:
    """Assistant with all credentials and the mocked transport."""
    return KitchenAssistant(
        cohere_api_key="cohere-key",
        clarifai_api_key="clarifai-key",
        spoonacular_api_key="spoon-key",
        session=mock_session,
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable Config reads so defaults apply."""
    for name in (
        "COHERE_API_KEY",
        "CLARIFAI_API_KEY",
        "SPOONACULAR_API_KEY",
        "CLARIFAI_USER_ID",
        "CLARIFAI_APP_ID",
        "COHERE_MODEL",
        "TEMPERATURE",
        "ENABLE_WEB_SEARCH",
        "MAX_RECIPES",
        "MIN_INGREDIENT_CONFIDENCE",
        "REQUEST_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
