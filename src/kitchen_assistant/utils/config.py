"""Configuration management for Kitchen Assistant.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv

from kitchen_assistant.errors import MissingCredential
from kitchen_assistant.models.models import AssistantSettings


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # API keys: one per remote service, all required
        self.COHERE_API_KEY: str = os.getenv("COHERE_API_KEY", "")
        self.CLARIFAI_API_KEY: str = os.getenv("CLARIFAI_API_KEY", "")
        self.SPOONACULAR_API_KEY: str = os.getenv("SPOONACULAR_API_KEY", "")
        # Clarifai account/app owning the recognition model.
        # Unset means the public "clarifai"/"main" pair, resolved per request.
        self.CLARIFAI_USER_ID: Optional[str] = os.getenv("CLARIFAI_USER_ID") or None
        self.CLARIFAI_APP_ID: Optional[str] = os.getenv("CLARIFAI_APP_ID") or None
        # Chat model and sampling temperature (0.0 = deterministic, 1.0 = max randomness)
        self.COHERE_MODEL: str = os.getenv("COHERE_MODEL", "command-r-plus")
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        # Let the chat model ground answers with the web-search connector
        self.ENABLE_WEB_SEARCH: bool = _env_bool("ENABLE_WEB_SEARCH", "true")
        # Maximum number of recipes returned by ingredient search
        self.MAX_RECIPES: int = int(os.getenv("MAX_RECIPES", "5"))
        # Concepts must score strictly above this to count as ingredients
        self.MIN_INGREDIENT_CONFIDENCE: float = float(os.getenv("MIN_INGREDIENT_CONFIDENCE", "0.75"))
        # Total timeout per request for sessions the client opens itself. Unset: no timeout.
        timeout = os.getenv("REQUEST_TIMEOUT_SECONDS")
        self.REQUEST_TIMEOUT_SECONDS: Optional[float] = float(timeout) if timeout else None

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            MissingCredential: If a required API key is missing.
            ValueError: If a numeric setting is out of range.
        """
        if not self.COHERE_API_KEY:
            raise MissingCredential("COHERE_API_KEY", "the cooking assistant chat")
        if not self.CLARIFAI_API_KEY:
            raise MissingCredential("CLARIFAI_API_KEY", "ingredient detection")
        if not self.SPOONACULAR_API_KEY:
            raise MissingCredential("SPOONACULAR_API_KEY", "recipe search")
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if not (0.0 <= self.MIN_INGREDIENT_CONFIDENCE <= 1.0):
            raise ValueError(
                f"MIN_INGREDIENT_CONFIDENCE must be between 0.0 and 1.0, got: {self.MIN_INGREDIENT_CONFIDENCE}"
            )
        if self.MAX_RECIPES < 1:
            raise ValueError(
                f"MAX_RECIPES must be at least 1, got: {self.MAX_RECIPES}"
            )
        if self.REQUEST_TIMEOUT_SECONDS is not None and self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )

    def to_settings(self) -> AssistantSettings:
        """Build the tunable (non-secret) client settings."""
        return AssistantSettings(
            chat_model=self.COHERE_MODEL,
            temperature=self.TEMPERATURE,
            web_search=self.ENABLE_WEB_SEARCH,
            max_recipes=self.MAX_RECIPES,
            min_ingredient_confidence=self.MIN_INGREDIENT_CONFIDENCE,
            request_timeout_seconds=self.REQUEST_TIMEOUT_SECONDS,
        )
