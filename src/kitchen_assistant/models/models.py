"""Data models for Kitchen Assistant.

Defines Pydantic models for conversation turns, image concepts, recipes and
client settings. All models use Pydantic v2.

Remote records (concepts, recipes) allow extra fields so that everything the
remote service returned survives validation unmodified.
"""

from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatRole(str, Enum):
    """Speaker of a conversation turn, using the chat service's wire values."""

    USER = "USER"
    ASSISTANT = "CHATBOT"


class ChatTurn(BaseModel):
    """One message in the conversation history."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole
    message: str


class Concept(BaseModel):
    """A label with a confidence score returned by the image recognition model."""

    model_config = ConfigDict(extra="allow")

    name: str
    # No coercion: a string score is rejected rather than converted
    value: Annotated[float, Field(ge=0.0, le=1.0, strict=True, description="Confidence score (0.0-1.0)")]


class IngredientDetectionResult(BaseModel):
    """Ingredients detected in an image.

    - ingredients: concept names scoring above the confidence threshold, in remote order
    - all_concepts: every concept returned, unfiltered, in remote order
    """

    model_config = ConfigDict(populate_by_name=True)

    ingredients: List[str] = Field(default_factory=list)
    all_concepts: List[Concept] = Field(default_factory=list, alias="allConcepts")


class RecipeIngredient(BaseModel):
    """Ingredient entry inside a recipe search result."""

    model_config = ConfigDict(extra="allow")

    name: str
    amount: Optional[float] = None
    unit: Optional[str] = None
    original: Optional[str] = None


class Recipe(BaseModel):
    """Recipe search result enriched with its detail record.

    Summary fields come from the ingredient search; ``instructions``,
    ``source_url``, ``ready_in_minutes`` and ``servings`` come from the
    per-recipe detail lookup. Field aliases match the recipe service's
    camelCase keys, so ``model_dump(by_alias=True)`` returns the merged record
    in the service's own shape.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Annotated[int, Field(description="Recipe ID from Spoonacular API")]
    title: Optional[str] = None
    image: Optional[str] = None
    used_ingredient_count: Optional[int] = Field(None, alias="usedIngredientCount")
    missed_ingredient_count: Optional[int] = Field(None, alias="missedIngredientCount")
    used_ingredients: List[RecipeIngredient] = Field(default_factory=list, alias="usedIngredients")
    missed_ingredients: List[RecipeIngredient] = Field(default_factory=list, alias="missedIngredients")
    unused_ingredients: List[RecipeIngredient] = Field(default_factory=list, alias="unusedIngredients")
    likes: Optional[int] = None

    instructions: Optional[str] = None
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    ready_in_minutes: Optional[int] = Field(None, alias="readyInMinutes")
    servings: Optional[int] = None


class AssistantSettings(BaseModel):
    """Tunable, non-secret settings of a KitchenAssistant."""

    model_config = ConfigDict(frozen=True)

    chat_model: str = "command-r-plus"
    temperature: Annotated[float, Field(ge=0.0, le=1.0)] = 0.7
    web_search: bool = True
    max_recipes: Annotated[int, Field(ge=1, le=100)] = 5
    # 2 is the service code for this client's "maximize used ingredients" mode
    recipe_ranking: Annotated[int, Field(ge=1, le=2)] = 2
    ignore_pantry: bool = True
    min_ingredient_confidence: Annotated[float, Field(ge=0.0, le=1.0)] = 0.75
    request_timeout_seconds: Annotated[Optional[float], Field(gt=0)] = None


def dump_records(records: List[BaseModel]) -> List[dict[str, Any]]:
    """Serialize models to plain dicts using remote field names."""
    return [record.model_dump(by_alias=True, exclude_none=True) for record in records]
