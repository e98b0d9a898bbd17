"""Send an assembled coaching prompt to OpenAI and shape the reply."""

from openai import APIStatusError, AsyncOpenAI, RateLimitError

from fr8coach.core.config import Settings
from fr8coach.core.exceptions import ConfigurationError, UpstreamDependencyError
from fr8coach.core.logging import get_logger

logger = get_logger(__name__)

# Returned instead of an error when the provider is rate-limited or out of quota
FALLBACK_PLAYBOOK = """The coach is busy right now, so here is the standard playbook while you wait:

1. Qualify the lane: origin/destination, equipment, weight, commodity, pickup and delivery windows.
2. Check the market: pull current spot and contract rates for the lane and note the trend.
3. Vet the carrier: active authority, insurance on file, safety rating and past performance on the lane.
4. Confirm in writing: rate confirmation with accessorials, detention terms and appointment times.
5. Track proactively: check calls at pickup, mid-route and before delivery; tell the shipper about delays before they ask.
6. Close the loop: confirm POD, invoice promptly and ask the shipper for the next load.

Ask again in a minute for advice specific to your question."""


def _is_rate_limited(error: Exception) -> bool:
    if isinstance(error, RateLimitError):
        return True
    return isinstance(error, APIStatusError) and error.status_code == 429


def _with_contacts(text: str, contacts_block: str) -> str:
    if not contacts_block:
        return text
    return f"{contacts_block}\n\n{text}"


async def complete(
    messages: list[dict[str, str]],
    settings: Settings,
    contacts_block: str = "",
) -> str:
    """
    Run the chat completion for a coaching request.

    Args:
        messages: System instruction, history and current question
        settings: Application settings
        contacts_block: Rendered contacts, prefixed to whatever text is returned

    Returns:
        Reply text (model answer, or the fallback playbook when rate-limited)

    Raises:
        ConfigurationError: If OPENAI_API_KEY is missing
        UpstreamDependencyError: If the provider fails for any other reason
    """
    if not settings.OPENAI_API_KEY:
        raise ConfigurationError("Server not configured: OPENAI_API_KEY is missing.")

    client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)

    try:
        response = await client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=messages,
            temperature=settings.COACH_TEMPERATURE,
            max_tokens=settings.COACH_MAX_TOKENS,
        )
    except Exception as e:
        if _is_rate_limited(e):
            logger.warning(f"OpenAI rate limit/quota hit, returning fallback playbook: {e}")
            return _with_contacts(FALLBACK_PLAYBOOK, contacts_block)
        logger.error(f"OpenAI completion failed: {type(e).__name__}: {e}")
        raise UpstreamDependencyError("openai", f"{type(e).__name__}: {e}") from e

    text = ""
    if response.choices:
        text = (response.choices[0].message.content or "").strip()
    if not text:
        raise UpstreamDependencyError("openai", "Empty completion")

    return _with_contacts(text, contacts_block)
