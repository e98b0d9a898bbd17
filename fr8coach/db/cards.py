"""Read access to sales and ops coaching cards."""

from typing import Any

from fr8coach.core.config import Settings
from fr8coach.core.logging import get_logger
from fr8coach.db.supabase_client import get_supabase

logger = get_logger(__name__)

# Card type -> backing table. Types never share a table.
CARD_TABLES: dict[str, str] = {
    "sales": "sales_cards",
    "ops": "ops_cards",
}

DEFAULT_CARD_TYPE = "sales"


def list_cards(settings: Settings, card_type: str, limit: int) -> list[dict[str, Any]]:
    """
    List the newest cards of one type.

    Args:
        settings: Application settings
        card_type: "sales" or "ops"
        limit: Max cards to return

    Returns:
        Card rows, newest first

    Raises:
        KeyError: If card_type is unknown
        ConfigurationError: If Supabase is not configured
        Exception: If the query fails
    """
    table = CARD_TABLES[card_type]
    supabase = get_supabase(settings)

    response = (
        supabase.table(table)
        .select("*")
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    rows = response.data or []
    logger.debug(f"Fetched {len(rows)} {card_type} cards from {table}")
    return rows
