"""Read access to topic-tagged knowledge notes."""

import asyncio
from typing import Any

from fr8coach.core.config import Settings
from fr8coach.core.enrichment import EnrichmentResult, EnrichmentStatus
from fr8coach.core.logging import get_logger
from fr8coach.core.schemas_coach import KnowledgeNote
from fr8coach.db.supabase_client import get_supabase

logger = get_logger(__name__)


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so the query text matches literally.

    PostgREST rewrites ``*`` to ``%`` inside like/ilike patterns and offers
    no escape for it, so ``*`` is dropped rather than matched.
    """
    text = text.replace("*", "")
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _query_notes(
    settings: Settings, topic: str, query_text: str | None, limit: int
) -> list[dict[str, Any]]:
    supabase = get_supabase(settings)
    query = (
        supabase.table(settings.NOTES_TABLE)
        .select("topic, content, created_at")
        .eq("topic", topic)
    )
    if query_text:
        query = query.ilike("content", f"%{_escape_like(query_text)}%")
    response = query.order("created_at", desc=True).limit(limit).execute()
    return response.data or []


def _to_notes(rows: list[dict[str, Any]]) -> list[KnowledgeNote]:
    return [
        KnowledgeNote(
            topic=row.get("topic") or "",
            content=row.get("content") or "",
            created_at=row.get("created_at"),
        )
        for row in rows
        if row.get("content")
    ]


async def fetch_notes(
    settings: Settings,
    topic: str,
    query_text: str | None,
    limit: int,
) -> EnrichmentResult[KnowledgeNote]:
    """
    Fetch newest notes for a topic whose content contains query_text.

    Never raises: an unreachable or misconfigured store comes back as an
    error result so the coaching reply can proceed without notes.

    Args:
        settings: Application settings
        topic: Exact topic to match
        query_text: Case-insensitive substring filter; None/empty disables it
        limit: Max notes to return

    Returns:
        EnrichmentResult with notes ordered newest first
    """
    if limit <= 0:
        return EnrichmentResult.empty()

    try:
        rows = await asyncio.to_thread(_query_notes, settings, topic, query_text, limit)
    except Exception as e:
        return EnrichmentResult.error(f"{topic} notes query failed: {e}")

    return EnrichmentResult.ok(_to_notes(rows)[:limit])


async def fetch_notes_with_fallback(
    settings: Settings,
    topic: str,
    query_text: str | None,
    limit: int,
) -> tuple[EnrichmentResult[KnowledgeNote], EnrichmentResult[KnowledgeNote]]:
    """
    Fetch filtered notes, then the topic's most recent notes if that found nothing.

    The fallback query only runs when the filtered query returns zero rows
    (not when it errors), so topic-relevant grounding is present even
    without keyword overlap.

    Returns:
        (primary, fallback) results; fallback is empty when not needed
    """
    primary = await fetch_notes(settings, topic, query_text, limit)
    if primary.status != EnrichmentStatus.EMPTY or not query_text:
        return primary, EnrichmentResult.empty()

    logger.debug(f"No '{topic}' notes matched query text, falling back to most recent")
    fallback = await fetch_notes(settings, topic, None, limit)
    return primary, fallback
