"""KitchenAssistant: cooking chat, ingredient detection and recipe search.

Composes three remote services behind one async client:
- Cohere chat for cooking questions (with in-memory conversation history)
- Clarifai food recognition for ingredient detection from images
- Spoonacular for ingredient-based recipe search

The client holds its credentials read-only and owns one piece of mutable
state: the conversation history, guarded by a per-instance asyncio.Lock so
concurrent questions on the same instance are answered one at a time.
"""

import asyncio
from typing import List, Optional, Sequence

import aiohttp

from kitchen_assistant.errors import InvalidInput, MissingCredential
from kitchen_assistant.models.models import (
    AssistantSettings,
    ChatRole,
    ChatTurn,
    IngredientDetectionResult,
    Recipe,
)
from kitchen_assistant.tools.chat import send_chat_message
from kitchen_assistant.tools.ingredients import recognize_ingredients
from kitchen_assistant.tools.spoonacular import normalize_ingredients, search_recipes
from kitchen_assistant.utils.config import Config
from kitchen_assistant.utils.logger import logger


class KitchenAssistant:
    """Async client for cooking chat, ingredient detection and recipe search.

    Usage:
        async with KitchenAssistant(cohere_key, clarifai_key, spoonacular_key) as assistant:
            reply = await assistant.ask_cooking_assistant("How do I poach an egg?")
            detected = await assistant.detect_ingredients(image_base64)
            recipes = await assistant.get_recipes(detected.ingredients)
    """

    def __init__(
        self,
        cohere_api_key: str,
        clarifai_api_key: str,
        spoonacular_api_key: str,
        clarifai_user_id: Optional[str] = None,
        clarifai_app_id: Optional[str] = None,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        settings: Optional[AssistantSettings] = None,
    ) -> None:
        """Initialize the assistant with its API credentials.

        Args:
            cohere_api_key: API key for the chat service.
            clarifai_api_key: API key for image recognition.
            spoonacular_api_key: API key for recipe search.
            clarifai_user_id: Account owning the recognition model (default "clarifai" per request).
            clarifai_app_id: App owning the recognition model (default "main" per request).
            session: Optional aiohttp session to use as transport. When omitted, the
                assistant opens its own on first use and closes it in close().
            settings: Optional tunables; defaults match AssistantSettings().

        Raises:
            MissingCredential: If any of the three API keys is missing or empty.
        """
        if not cohere_api_key:
            raise MissingCredential("cohere_api_key", "the cooking assistant chat")
        if not clarifai_api_key:
            raise MissingCredential("clarifai_api_key", "ingredient detection")
        if not spoonacular_api_key:
            raise MissingCredential("spoonacular_api_key", "recipe search")

        self._cohere_api_key = cohere_api_key
        self._clarifai_api_key = clarifai_api_key
        self._spoonacular_api_key = spoonacular_api_key
        self._clarifai_user_id = clarifai_user_id
        self._clarifai_app_id = clarifai_app_id
        self.settings = settings or AssistantSettings()

        self._session = session
        self._owns_session = session is None

        self._chat_history: List[ChatTurn] = []
        self._history_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        config: Config,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "KitchenAssistant":
        """Build an assistant from environment configuration.

        Raises:
            MissingCredential: If a required API key is missing.
            ValueError: If a numeric setting is out of range.
        """
        config.validate()
        return cls(
            cohere_api_key=config.COHERE_API_KEY,
            clarifai_api_key=config.CLARIFAI_API_KEY,
            spoonacular_api_key=config.SPOONACULAR_API_KEY,
            clarifai_user_id=config.CLARIFAI_USER_ID,
            clarifai_app_id=config.CLARIFAI_APP_ID,
            session=session,
            settings=config.to_settings(),
        )

    @property
    def clarifai_user_id(self) -> Optional[str]:
        return self._clarifai_user_id

    @property
    def clarifai_app_id(self) -> Optional[str]:
        return self._clarifai_app_id

    @property
    def chat_history(self) -> List[ChatTurn]:
        """Copy of the conversation so far, oldest turn first."""
        return list(self._chat_history)

    async def __aenter__(self) -> "KitchenAssistant":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = None
            if self.settings.request_timeout_seconds is not None:
                timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout) if timeout else aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this assistant opened it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def ask_cooking_assistant(self, question: str) -> str:
        """Ask a cooking question, with the conversation so far as context.

        On success the question and the reply are appended to the history, in
        that order. On failure the history is left unchanged.

        Args:
            question: The cooking-related question.

        Returns:
            The assistant's reply text.

        Raises:
            InvalidInput: If the question is empty.
            AssistantCallFailed: If the chat request fails.
        """
        if not question or not isinstance(question, str):
            raise InvalidInput("Please provide a question")

        async with self._history_lock:
            logger.info(f"Asking cooking assistant ({len(self._chat_history)} turns of history)")
            reply = await send_chat_message(
                self._get_session(),
                self._cohere_api_key,
                question,
                list(self._chat_history),
                self.settings,
            )
            self._chat_history.append(ChatTurn(role=ChatRole.USER, message=question))
            self._chat_history.append(ChatTurn(role=ChatRole.ASSISTANT, message=reply))

        return reply

    def clear_chat_history(self) -> None:
        """Forget the conversation so far."""
        self._chat_history = []

    async def detect_ingredients(self, image_base64: str) -> IngredientDetectionResult:
        """Detect food ingredients in an image.

        Args:
            image_base64: Base64-encoded image, optionally with a
                ``data:image/<type>;base64,`` prefix.

        Returns:
            IngredientDetectionResult: names scoring above the confidence threshold
            plus every concept the model returned.

        Raises:
            InvalidInput: If no image is provided.
            IngredientDetectionFailed: If the recognition request fails.
        """
        if not image_base64 or not isinstance(image_base64, str):
            raise InvalidInput("No image provided")

        result = await recognize_ingredients(
            self._get_session(),
            self._clarifai_api_key,
            image_base64,
            self.settings.min_ingredient_confidence,
            user_id=self._clarifai_user_id,
            app_id=self._clarifai_app_id,
        )
        logger.info(
            f"Detected {len(result.ingredients)} ingredients "
            f"({len(result.all_concepts)} concepts returned)"
        )
        return result

    async def get_recipes(self, ingredients: Sequence[str]) -> List[Recipe]:
        """Find recipes that use the given ingredients, with full details.

        Args:
            ingredients: Ingredient names. Blank entries are ignored.

        Returns:
            Up to ``settings.max_recipes`` recipes in search order, each carrying
            its summary fields plus instructions, source URL, ready time and servings.

        Raises:
            InvalidInput: If no ingredients are provided.
            RecipeSearchFailed: If the search or any detail lookup fails.
        """
        if not ingredients or isinstance(ingredients, str):
            raise InvalidInput("Please provide ingredients")

        cleaned = normalize_ingredients(ingredients)
        if not cleaned:
            raise InvalidInput("Please provide ingredients")

        logger.info(f"Searching recipes for: {', '.join(cleaned)}")
        return await search_recipes(self._get_session(), self._spoonacular_api_key, cleaned, self.settings)
