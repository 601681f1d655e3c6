"""System preamble for the cooking assistant chat."""

COOKING_ASSISTANT_PREAMBLE = (
    "You are a knowledgeable cooking assistant. You help users with cooking-related questions, "
    "recipe modifications, ingredient substitutions, and cooking techniques. "
    "Provide clear, concise, and practical advice."
)


def get_system_preamble() -> str:
    """Return the fixed system instruction sent with every chat request."""
    return COOKING_ASSISTANT_PREAMBLE
