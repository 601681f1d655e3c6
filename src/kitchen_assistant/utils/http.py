"""Async HTTP transport helper built on aiohttp.

All remote calls go through request_json(), which turns every transport
outcome into either a decoded JSON body or an HTTPRequestError carrying the
HTTP status and the remote error body (when there is one).
"""

import asyncio
from typing import Any, Optional

import aiohttp

from kitchen_assistant.utils.logger import logger


class HTTPRequestError(Exception):
    """Transport-level failure of a single HTTP request.

    Attributes:
        message: Transport-level description (reason phrase or client error text).
        status: HTTP status code, or None if no response was received.
        payload: Decoded JSON error body, or None if absent or not JSON.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


async def _read_payload(response: aiohttp.ClientResponse) -> Any:
    """Decode a response body as JSON regardless of its content type.

    Returns:
        Decoded body, or None if the body is empty or not valid JSON.
    """
    try:
        return await response.json(content_type=None)
    except ValueError:
        return None


async def request_json(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    *,
    params: Optional[dict[str, Any]] = None,
    json: Optional[dict[str, Any]] = None,
    headers: Optional[dict[str, str]] = None,
) -> Any:
    """Send one HTTP request and return its decoded JSON body.

    Args:
        session: aiohttp session used as transport (owns timeouts and pooling).
        method: HTTP method ("GET", "POST", ...).
        url: Absolute request URL.
        params: Query-string parameters. Values must be str, int or float.
        json: JSON request body.
        headers: Extra request headers.

    Returns:
        Decoded JSON body, or None for an empty body.

    Raises:
        HTTPRequestError: On HTTP status >= 400, connection errors and timeouts.
    """
    try:
        async with session.request(method, url, params=params, json=json, headers=headers) as response:
            payload = await _read_payload(response)
            if response.status >= 400:
                reason = response.reason or "HTTP error"
                raise HTTPRequestError(
                    f"Request failed with status code {response.status} ({reason})",
                    status=response.status,
                    payload=payload,
                )
            return payload
    except HTTPRequestError:
        raise
    except asyncio.TimeoutError as e:
        logger.debug(f"{method} {url} timed out")
        raise HTTPRequestError(f"Request timed out: {method} {url}") from e
    except aiohttp.ClientError as e:
        raise HTTPRequestError(str(e) or type(e).__name__) from e
