"""Kitchen Assistant: cooking chat, ingredient detection and recipe search."""

from kitchen_assistant.agents.assistant import KitchenAssistant
from kitchen_assistant.errors import (
    AssistantCallFailed,
    IngredientDetectionFailed,
    InvalidInput,
    KitchenAssistantError,
    MissingCredential,
    RecipeSearchFailed,
    extract_message,
)
from kitchen_assistant.models.models import (
    AssistantSettings,
    ChatRole,
    ChatTurn,
    Concept,
    IngredientDetectionResult,
    Recipe,
)

__version__ = "1.0.0"

__all__ = [
    "AssistantCallFailed",
    "AssistantSettings",
    "ChatRole",
    "ChatTurn",
    "Concept",
    "IngredientDetectionFailed",
    "IngredientDetectionResult",
    "InvalidInput",
    "KitchenAssistant",
    "KitchenAssistantError",
    "MissingCredential",
    "Recipe",
    "RecipeSearchFailed",
    "extract_message",
]
