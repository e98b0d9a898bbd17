"""Request-time context assembly for the coaching endpoint.

Flow for one request:
    extract company ─┬─> find contacts ───────────────┐
    primary notes (+ fallback) ──────────────────────┼─> build prompt -> complete
    industry notes ──────────────────────────────────┘

Notes and contacts are optional enrichments: their failures are logged and
the reply is produced with whatever context is left. Only the model call
can fail the request.
"""

import asyncio
import logging
import uuid
from collections.abc import Sequence

from fr8coach.chains.coach_completion import complete
from fr8coach.context.prompt_builder import build_prompt, format_contacts_block
from fr8coach.core.company_extractor import extract_company
from fr8coach.core.config import Settings
from fr8coach.core.contact_finder import find_contacts
from fr8coach.core.exceptions import UpstreamDependencyError
from fr8coach.core.logging import get_logger, log_with_context
from fr8coach.core.schemas_coach import ContextBundle, ConversationTurn
from fr8coach.db.knowledge_notes import fetch_notes, fetch_notes_with_fallback

logger = get_logger(__name__)


async def assemble_context(
    prompt: str,
    history: Sequence[ConversationTurn],
    settings: Settings,
    request_id: str | None = None,
) -> ContextBundle:
    """
    Gather notes and contacts for a question, concurrently.

    Args:
        prompt: Current question
        history: Prior turns (already windowed)
        settings: Application settings
        request_id: Correlation id for log lines

    Returns:
        ContextBundle ready for the prompt builder
    """
    company = extract_company(prompt, history)

    primary_pair, industry, contacts = await asyncio.gather(
        fetch_notes_with_fallback(
            settings, settings.COACH_PRIMARY_TOPIC, prompt, settings.PRIMARY_NOTE_SLOTS
        ),
        fetch_notes(settings, settings.COACH_INDUSTRY_TOPIC, prompt, settings.INDUSTRY_NOTE_SLOTS),
        find_contacts(settings, company, settings.CONTACT_MAX_RESULTS),
    )
    primary, fallback = primary_pair

    bundle = ContextBundle(
        primary_notes=primary.unwrap_or_log(logger, "primary_notes", request_id),
        fallback_notes=fallback.unwrap_or_log(logger, "fallback_notes", request_id),
        industry_notes=industry.unwrap_or_log(logger, "industry_notes", request_id),
        contacts=contacts.unwrap_or_log(logger, "contacts", request_id),
        company=company,
        primary_slots=settings.PRIMARY_NOTE_SLOTS,
        industry_slots=settings.INDUSTRY_NOTE_SLOTS,
    )

    log_with_context(
        logger,
        logging.INFO,
        "Context assembled",
        request_id=request_id,
        company=company,
        primary=len(bundle.primary_notes),
        fallback=len(bundle.fallback_notes),
        industry=len(bundle.industry_notes),
        surfaced=len(bundle.surfaced_notes()),
        contacts=len(bundle.contacts),
    )
    return bundle


async def _run_coach(
    prompt: str,
    history: Sequence[ConversationTurn],
    settings: Settings,
    user_email: str | None,
    request_id: str,
) -> str:
    window = list(history)[-settings.HISTORY_WINDOW :] if settings.HISTORY_WINDOW > 0 else []
    bundle = await assemble_context(prompt, window, settings, request_id)
    coach_prompt = build_prompt(bundle, window, prompt, settings, user_email=user_email)
    contacts_block = format_contacts_block(bundle.company, bundle.contacts)
    return await complete(coach_prompt.messages, settings, contacts_block=contacts_block)


async def coach_reply(
    prompt: str,
    history: Sequence[ConversationTurn],
    settings: Settings,
    user_email: str | None = None,
) -> str:
    """
    Produce a coaching reply under the request-level timeout.

    Args:
        prompt: Current question (non-empty)
        history: Client-supplied prior turns, chronological
        settings: Application settings
        user_email: Optional rep email

    Returns:
        Reply text

    Raises:
        ConfigurationError: If the model provider is not configured
        UpstreamDependencyError: If the model call fails or the timeout expires
    """
    request_id = uuid.uuid4().hex[:8]
    log_with_context(
        logger,
        logging.INFO,
        "Coach request received",
        request_id=request_id,
        user_email=user_email or "-",
        history_turns=len(history),
    )

    try:
        return await asyncio.wait_for(
            _run_coach(prompt, history, settings, user_email, request_id),
            timeout=settings.COACH_REQUEST_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError as e:
        logger.error(
            f"[{request_id}] Coach request timed out after "
            f"{settings.COACH_REQUEST_TIMEOUT_SECONDS}s"
        )
        raise UpstreamDependencyError(
            "pipeline", f"Timed out after {settings.COACH_REQUEST_TIMEOUT_SECONDS}s"
        ) from e
