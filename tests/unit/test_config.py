"""Unit tests for configuration management."""

import pytest

from kitchen_assistant.errors import MissingCredential
from kitchen_assistant.models.models import AssistantSettings
from kitchen_assistant.utils.config import Config


def _set_keys(monkeypatch) -> None:
    monkeypatch.setenv("COHERE_API_KEY", "cohere-key")
    monkeypatch.setenv("CLARIFAI_API_KEY", "clarifai-key")
    monkeypatch.setenv("SPOONACULAR_API_KEY", "spoon-key")


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self, clean_env):
        """Test that Config uses default values when env vars not set."""
        config = Config()

        assert config.COHERE_API_KEY == ""
        assert config.CLARIFAI_USER_ID is None
        assert config.CLARIFAI_APP_ID is None
        assert config.COHERE_MODEL == "command-r-plus"
        assert config.TEMPERATURE == 0.7
        assert config.ENABLE_WEB_SEARCH is True
        assert config.MAX_RECIPES == 5
        assert config.MIN_INGREDIENT_CONFIDENCE == 0.75
        assert config.REQUEST_TIMEOUT_SECONDS is None

    def test_config_loads_from_environment(self, clean_env):
        """Test that Config loads values from environment variables."""
        _set_keys(clean_env)
        clean_env.setenv("CLARIFAI_USER_ID", "my-user")
        clean_env.setenv("CLARIFAI_APP_ID", "my-app")
        clean_env.setenv("COHERE_MODEL", "command-r")
        clean_env.setenv("TEMPERATURE", "0.3")
        clean_env.setenv("ENABLE_WEB_SEARCH", "false")
        clean_env.setenv("MAX_RECIPES", "8")
        clean_env.setenv("MIN_INGREDIENT_CONFIDENCE", "0.9")
        clean_env.setenv("REQUEST_TIMEOUT_SECONDS", "15")

        config = Config()

        assert config.COHERE_API_KEY == "cohere-key"
        assert config.CLARIFAI_API_KEY == "clarifai-key"
        assert config.SPOONACULAR_API_KEY == "spoon-key"
        assert config.CLARIFAI_USER_ID == "my-user"
        assert config.CLARIFAI_APP_ID == "my-app"
        assert config.COHERE_MODEL == "command-r"
        assert config.TEMPERATURE == 0.3
        assert config.ENABLE_WEB_SEARCH is False
        assert config.MAX_RECIPES == 8
        assert config.MIN_INGREDIENT_CONFIDENCE == 0.9
        assert config.REQUEST_TIMEOUT_SECONDS == 15.0

    def test_empty_clarifai_ids_are_none(self, clean_env):
        """Empty optional ids are treated as unset."""
        clean_env.setenv("CLARIFAI_USER_ID", "")
        config = Config()
        assert config.CLARIFAI_USER_ID is None

    def test_to_settings(self, clean_env):
        """Test that Config maps onto AssistantSettings."""
        clean_env.setenv("TEMPERATURE", "0.2")
        clean_env.setenv("MAX_RECIPES", "3")

        settings = Config().to_settings()

        assert isinstance(settings, AssistantSettings)
        assert settings.temperature == 0.2
        assert settings.max_recipes == 3
        assert settings.recipe_ranking == 2
        assert settings.ignore_pantry is True


class TestConfigValidation:
    """Test Config validation logic."""

    @pytest.mark.parametrize(
        "missing",
        ["COHERE_API_KEY", "CLARIFAI_API_KEY", "SPOONACULAR_API_KEY"],
    )
    def test_validate_raises_for_missing_key(self, clean_env, missing):
        """Test that validate() names the missing API key."""
        _set_keys(clean_env)
        clean_env.setenv(missing, "")

        config = Config()
        with pytest.raises(MissingCredential, match=missing) as exc_info:
            config.validate()
        assert exc_info.value.field_name == missing

    def test_validate_succeeds_with_all_keys(self, clean_env):
        _set_keys(clean_env)
        Config().validate()  # Should not raise

    def test_validate_rejects_temperature_out_of_range(self, clean_env):
        _set_keys(clean_env)
        clean_env.setenv("TEMPERATURE", "1.5")
        with pytest.raises(ValueError, match="TEMPERATURE"):
            Config().validate()

    def test_validate_rejects_confidence_out_of_range(self, clean_env):
        _set_keys(clean_env)
        clean_env.setenv("MIN_INGREDIENT_CONFIDENCE", "-0.1")
        with pytest.raises(ValueError, match="MIN_INGREDIENT_CONFIDENCE"):
            Config().validate()

    def test_validate_rejects_zero_recipes(self, clean_env):
        _set_keys(clean_env)
        clean_env.setenv("MAX_RECIPES", "0")
        with pytest.raises(ValueError, match="MAX_RECIPES"):
            Config().validate()

    def test_validate_rejects_non_positive_timeout(self, clean_env):
        _set_keys(clean_env)
        clean_env.setenv("REQUEST_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValueError, match="REQUEST_TIMEOUT_SECONDS"):
            Config().validate()
