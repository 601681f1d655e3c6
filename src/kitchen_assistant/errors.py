"""Domain errors for Kitchen Assistant.

Every remote-call failure is caught where the call is made and re-raised as
exactly one of the errors below, so callers never see raw aiohttp exceptions.
"""

from typing import Any, Optional


class KitchenAssistantError(Exception):
    """Base class for all Kitchen Assistant errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingCredential(KitchenAssistantError):
    """A required API key was absent or empty at construction time."""

    def __init__(self, field_name: str, purpose: Optional[str] = None) -> None:
        message = f"{field_name} is required"
        if purpose:
            message += f" for {purpose}"
        super().__init__(message)
        self.field_name = field_name


class InvalidInput(KitchenAssistantError):
    """Caller supplied an empty or absent required argument."""


class AssistantCallFailed(KitchenAssistantError):
    """Chat request to the cooking assistant failed."""


class IngredientDetectionFailed(KitchenAssistantError):
    """Image recognition request failed or returned an unusable body."""


class RecipeSearchFailed(KitchenAssistantError):
    """Recipe search or one of its detail lookups failed."""


def _status_description(payload: dict[str, Any]) -> Optional[str]:
    """Read the vision service's ``status`` error envelope, if present."""
    status = payload.get("status")
    if not isinstance(status, dict):
        return None

    description = status.get("description")
    if not isinstance(description, str) or not description:
        return None

    details = status.get("details")
    if isinstance(details, str) and details:
        return f"{description}: {details}"
    return description


def extract_message(raw_error: BaseException) -> str:
    """Return the most useful human-readable message for a failed remote call.

    Fallback chain:
        1. ``payload["message"]`` from the remote error body.
        2. ``payload["status"]["description"]`` (plus ``details``), the
           envelope used by the image recognition service.
        3. The transport-level message of the exception.
        4. The exception class name, when everything else is empty.

    Args:
        raw_error: Exception raised by the transport or by response parsing.
            Only ``payload`` and ``message`` attributes are inspected, so any
            exception type is accepted.

    Returns:
        Non-empty message string.
    """
    payload = getattr(raw_error, "payload", None)
    if isinstance(payload, dict):
        remote_message = payload.get("message")
        if isinstance(remote_message, str) and remote_message:
            return remote_message

        description = _status_description(payload)
        if description:
            return description

    transport_message = getattr(raw_error, "message", None)
    if isinstance(transport_message, str) and transport_message:
        return transport_message

    return str(raw_error) or type(raw_error).__name__
