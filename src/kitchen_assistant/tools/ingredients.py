"""Ingredient detection from images using the Clarifai food recognition model.

Core Functions:
- strip_data_uri_prefix(): Remove a leading ``data:image/<type>;base64,`` prefix
- parse_concepts(): Read ``outputs[0].data.concepts`` from a model response
- filter_ingredients_by_confidence(): Keep concept names above the threshold
- recognize_ingredients(): Call the model and shape the result
"""

import re
from typing import Any, List, Optional

import aiohttp
from pydantic import ValidationError

from kitchen_assistant.errors import IngredientDetectionFailed, extract_message
from kitchen_assistant.models.models import Concept, IngredientDetectionResult
from kitchen_assistant.utils.http import HTTPRequestError, request_json
from kitchen_assistant.utils.logger import logger

CLARIFAI_API_BASE = "https://api.clarifai.com/v2"
FOOD_MODEL_ID = "food-item-recognition"
DEFAULT_CLARIFAI_USER_ID = "clarifai"
DEFAULT_CLARIFAI_APP_ID = "main"
STATUS_SUCCESS = 10000

# Anchored: only a well-formed prefix at the very start is removed
_DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")


class MalformedVisionResponse(Exception):
    """Recognition model answered 2xx with an unexpected body.

    ``payload`` holds the failed output record when the model reported one, so
    its status description is what ``extract_message`` returns.
    """

    def __init__(self, message: str, payload: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload


def _failed_output(body: Any) -> Optional[dict[str, Any]]:
    """Return ``outputs[0]`` when it carries a non-success status."""
    try:
        output = body["outputs"][0]
        status = output["status"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(status, dict) or status.get("code") == STATUS_SUCCESS:
        return None
    return output


def strip_data_uri_prefix(image_base64: str) -> str:
    """Return the bare base64 payload of an image string.

    Examples:
        "data:image/png;base64,AAAA" -> "AAAA"
        "AAAA" -> "AAAA"
    """
    return _DATA_URI_PREFIX.sub("", image_base64, count=1)


def resolve_clarifai_app(user_id: Optional[str], app_id: Optional[str]) -> tuple[str, str]:
    """Resolve the (user, app) pair, falling back to the public model owner."""
    return user_id or DEFAULT_CLARIFAI_USER_ID, app_id or DEFAULT_CLARIFAI_APP_ID


def build_model_url(user_id: str, app_id: str, model_id: str = FOOD_MODEL_ID) -> str:
    return f"{CLARIFAI_API_BASE}/users/{user_id}/apps/{app_id}/models/{model_id}/outputs"


def parse_concepts(body: Any) -> List[Concept]:
    """Read the concept list from a model outputs response.

    Args:
        body: Decoded JSON response body.

    Returns:
        Concepts in the order the model returned them.

    Raises:
        MalformedVisionResponse: If the body lacks ``outputs[0].data.concepts``
            or a concept has no name or a non-numeric value.
    """
    try:
        raw_concepts = body["outputs"][0]["data"]["concepts"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedVisionResponse(
            "Recognition response did not contain concepts", payload=_failed_output(body)
        ) from e

    if not isinstance(raw_concepts, list):
        raise MalformedVisionResponse("Recognition response concepts is not a list")

    try:
        return [Concept.model_validate(concept) for concept in raw_concepts]
    except ValidationError as e:
        raise MalformedVisionResponse(f"Invalid concept in recognition response: {e.errors()[0]['msg']}") from e


def filter_ingredients_by_confidence(concepts: List[Concept], min_confidence: float) -> List[str]:
    """Return names of concepts scoring strictly above min_confidence.

    Args:
        concepts: Concepts in remote order.
        min_confidence: Exclusive threshold (a score equal to it is dropped).

    Returns:
        Ingredient names, order preserved.
    """
    ingredients = [concept.name for concept in concepts if concept.value > min_confidence]

    if len(ingredients) < len(concepts):
        logger.debug(
            f"Filtered concepts: {len(concepts)} → {len(ingredients)} "
            f"(confidence threshold: {min_confidence})"
        )

    return ingredients


async def recognize_ingredients(
    session: aiohttp.ClientSession,
    api_key: str,
    image_base64: str,
    min_confidence: float,
    user_id: Optional[str] = None,
    app_id: Optional[str] = None,
) -> IngredientDetectionResult:
    """Detect ingredients in a base64 image (with or without a data URI prefix).

    Args:
        session: aiohttp session used as transport.
        api_key: Clarifai API key (sent as ``Key`` authorization).
        image_base64: Base64 image, optionally prefixed with ``data:image/...;base64,``.
        min_confidence: Exclusive confidence threshold for ``ingredients``.
        user_id: Clarifai account owning the model (default "clarifai").
        app_id: Clarifai app owning the model (default "main").

    Returns:
        IngredientDetectionResult with filtered names and all concepts.

    Raises:
        IngredientDetectionFailed: On any transport, remote or response-shape failure.
    """
    payload_base64 = strip_data_uri_prefix(image_base64)
    user_id, app_id = resolve_clarifai_app(user_id, app_id)

    body = {
        "user_app_id": {"user_id": user_id, "app_id": app_id},
        "inputs": [{"data": {"image": {"base64": payload_base64}}}],
    }
    headers = {
        "Authorization": f"Key {api_key}",
        "Content-Type": "application/json",
    }

    logger.debug(f"Submitting image to {user_id}/{app_id}/{FOOD_MODEL_ID} ({len(payload_base64) / 1024:.1f} KB base64)")
    try:
        response = await request_json(session, "POST", build_model_url(user_id, app_id), json=body, headers=headers)
        concepts = parse_concepts(response)
    except (HTTPRequestError, MalformedVisionResponse) as e:
        message = extract_message(e)
        logger.error(f"Failed to recognize ingredients: {message}", extra={"service": "clarifai"})
        raise IngredientDetectionFailed(message) from e

    return IngredientDetectionResult(
        ingredients=filter_ingredients_by_confidence(concepts, min_confidence),
        all_concepts=concepts,
    )
