"""Cohere chat call for the cooking assistant.

Builds the chat request (question, prior turns, preamble, sampling settings,
optional web-search connector) and extracts the reply text. Conversation
state is not kept here; the caller owns the history and passes a snapshot.
"""

from typing import Any, Sequence

import aiohttp

from kitchen_assistant.errors import AssistantCallFailed, extract_message
from kitchen_assistant.models.models import AssistantSettings, ChatTurn
from kitchen_assistant.prompts.prompts import get_system_preamble
from kitchen_assistant.utils.http import HTTPRequestError, request_json
from kitchen_assistant.utils.logger import logger

COHERE_CHAT_URL = "https://api.cohere.ai/v1/chat"
WEB_SEARCH_CONNECTOR = {"id": "web-search"}


def build_chat_payload(
    question: str,
    history: Sequence[ChatTurn],
    settings: AssistantSettings,
) -> dict[str, Any]:
    """Build the JSON body of a chat request.

    Args:
        question: The new user message.
        history: Prior turns, oldest first.
        settings: Model name, temperature and web-search flag.

    Returns:
        Request body for the chat endpoint.
    """
    payload: dict[str, Any] = {
        "message": question,
        "model": settings.chat_model,
        "chat_history": [turn.model_dump(mode="json") for turn in history],
        "preamble": get_system_preamble(),
        "temperature": settings.temperature,
    }
    if settings.web_search:
        payload["connectors"] = [WEB_SEARCH_CONNECTOR]
    return payload


class MalformedChatResponse(Exception):
    """Chat service answered 2xx without a usable ``text`` field."""


def parse_chat_reply(body: Any) -> str:
    """Pull the reply text out of a chat response body.

    Raises:
        MalformedChatResponse: If the body has no string ``text`` field.
    """
    if not isinstance(body, dict) or not isinstance(body.get("text"), str):
        raise MalformedChatResponse("Chat response did not contain reply text")
    return body["text"]


async def send_chat_message(
    session: aiohttp.ClientSession,
    api_key: str,
    question: str,
    history: Sequence[ChatTurn],
    settings: AssistantSettings,
) -> str:
    """Send a question with its conversation context and return the reply.

    Args:
        session: aiohttp session used as transport.
        api_key: Cohere API key (sent as bearer token).
        question: The new user message.
        history: Prior turns, oldest first.
        settings: Chat settings.

    Returns:
        Reply text from the assistant.

    Raises:
        AssistantCallFailed: On any transport, remote or response-shape failure.
    """
    payload = build_chat_payload(question, history, settings)
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    logger.debug(f"Sending chat message ({len(question)} chars, {len(history)} prior turns)")
    try:
        body = await request_json(session, "POST", COHERE_CHAT_URL, json=payload, headers=headers)
        return parse_chat_reply(body)
    except (HTTPRequestError, MalformedChatResponse) as e:
        message = extract_message(e)
        logger.error(f"Cohere API request failed: {message}", extra={"service": "cohere"})
        raise AssistantCallFailed(message) from e
