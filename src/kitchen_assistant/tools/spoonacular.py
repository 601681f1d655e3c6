"""Spoonacular recipe search with per-recipe detail enrichment.

Two-step pattern:
1. find_recipes_by_ingredients(): one search call returning summary records
2. fetch_recipe_details(): one detail call per summary, issued concurrently,
   merged back into the summaries by position

The fan-out is all-or-nothing: the first failing detail call cancels the
rest and fails the whole search.
"""

import asyncio
from typing import Any, Awaitable, Iterable, List

import aiohttp
from pydantic import ValidationError

from kitchen_assistant.errors import RecipeSearchFailed, extract_message
from kitchen_assistant.models.models import AssistantSettings, Recipe
from kitchen_assistant.utils.http import HTTPRequestError, request_json
from kitchen_assistant.utils.logger import logger

SPOONACULAR_API_BASE = "https://api.spoonacular.com"
FIND_BY_INGREDIENTS_URL = f"{SPOONACULAR_API_BASE}/recipes/findByIngredients"

# Keys copied from the detail record into each summary record
DETAIL_FIELDS = ("instructions", "sourceUrl", "readyInMinutes", "servings")


class MalformedRecipeResponse(Exception):
    """Recipe service answered 2xx with an unexpected body."""


def normalize_ingredients(ingredients: Iterable[str]) -> List[str]:
    """Strip whitespace and drop blank entries, keeping order."""
    return [item.strip() for item in ingredients if isinstance(item, str) and item.strip()]


def recipe_information_url(recipe_id: Any) -> str:
    return f"{SPOONACULAR_API_BASE}/recipes/{recipe_id}/information"


async def gather_all_or_nothing(aws: Iterable[Awaitable[Any]]) -> List[Any]:
    """Run awaitables concurrently and return their results in input order.

    If any of them raises, the others are cancelled and the first exception
    is re-raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Drain cancelled tasks so none is left with an unretrieved exception
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def find_recipes_by_ingredients(
    session: aiohttp.ClientSession,
    api_key: str,
    ingredients: List[str],
    settings: AssistantSettings,
) -> List[dict[str, Any]]:
    """Search recipes that use the given ingredients.

    Returns:
        Summary records in the order the service ranked them.

    Raises:
        HTTPRequestError: On transport or remote failure.
        MalformedRecipeResponse: If the body is not a list of objects with an ``id``.
    """
    params = {
        "ingredients": ",".join(ingredients),
        "apiKey": api_key,
        "number": settings.max_recipes,
        "ranking": settings.recipe_ranking,
        # yarl only accepts str/int/float query values
        "ignorePantry": "true" if settings.ignore_pantry else "false",
    }
    body = await request_json(session, "GET", FIND_BY_INGREDIENTS_URL, params=params)

    if not isinstance(body, list):
        raise MalformedRecipeResponse("Recipe search response is not a list")
    for summary in body:
        if not isinstance(summary, dict) or "id" not in summary:
            raise MalformedRecipeResponse("Recipe search result without an id")
    return body


async def fetch_recipe_details(
    session: aiohttp.ClientSession,
    api_key: str,
    recipe_id: Any,
) -> dict[str, Any]:
    """Fetch the detail record of one recipe.

    Raises:
        HTTPRequestError: On transport or remote failure.
        MalformedRecipeResponse: If the body is not a JSON object.
    """
    logger.debug(f"Fetching details for recipe {recipe_id}")
    body = await request_json(session, "GET", recipe_information_url(recipe_id), params={"apiKey": api_key})
    if not isinstance(body, dict):
        raise MalformedRecipeResponse(f"Recipe {recipe_id} details response is not an object")
    return body


def merge_recipe(summary: dict[str, Any], details: dict[str, Any]) -> Recipe:
    """Combine a summary record with its detail record.

    All summary fields are kept; the detail fields are added on top.
    """
    merged = dict(summary)
    for field in DETAIL_FIELDS:
        merged[field] = details.get(field)
    return Recipe.model_validate(merged)


async def search_recipes(
    session: aiohttp.ClientSession,
    api_key: str,
    ingredients: List[str],
    settings: AssistantSettings,
) -> List[Recipe]:
    """Find recipes for the ingredients and enrich each with its details.

    Args:
        session: aiohttp session used as transport.
        api_key: Spoonacular API key.
        ingredients: Non-empty list of ingredient names.
        settings: Result cap, ranking mode and pantry flag.

    Returns:
        Merged recipes in search order.

    Raises:
        RecipeSearchFailed: If the search or any detail lookup fails.
    """
    try:
        summaries = await find_recipes_by_ingredients(session, api_key, ingredients, settings)
        logger.info(f"Found {len(summaries)} recipes, fetching details concurrently")

        details = await gather_all_or_nothing(
            fetch_recipe_details(session, api_key, summary["id"]) for summary in summaries
        )
        return [merge_recipe(summary, detail) for summary, detail in zip(summaries, details)]
    except (HTTPRequestError, MalformedRecipeResponse, ValidationError) as e:
        message = extract_message(e)
        logger.error(f"Failed to fetch recipes: {message}", extra={"service": "spoonacular"})
        raise RecipeSearchFailed(message) from e
