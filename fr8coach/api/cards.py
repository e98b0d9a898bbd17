"""Sales and ops card API endpoints."""

import asyncio

from fastapi import APIRouter, Depends, Query

from fr8coach.api.deps import get_app_settings
from fr8coach.core.config import Settings
from fr8coach.core.exceptions import (
    ConfigurationError,
    RequestValidationFailed,
    UpstreamDependencyError,
)
from fr8coach.core.logging import get_logger
from fr8coach.core.schemas_coach import CardsResponse
from fr8coach.db.cards import CARD_TABLES, DEFAULT_CARD_TYPE, list_cards

logger = get_logger(__name__)

router = APIRouter()


@router.get("/cards", response_model=CardsResponse)
async def get_cards(
    card_type: str = Query(DEFAULT_CARD_TYPE, alias="type", description="sales or ops"),
    settings: Settings = Depends(get_app_settings),
) -> CardsResponse:
    """
    List the newest cards of one type.

    Args:
        card_type: "sales" (default) or "ops"
        settings: Application settings

    Returns:
        CardsResponse with the type and its cards
    """
    card_type = card_type.strip().lower()
    if card_type not in CARD_TABLES:
        raise RequestValidationFailed(
            f"type must be one of: {', '.join(sorted(CARD_TABLES))}", field="type"
        )

    try:
        cards = await asyncio.to_thread(list_cards, settings, card_type, settings.CARDS_LIMIT)
    except ConfigurationError:
        raise
    except Exception as e:
        logger.error(f"Failed to list {card_type} cards: {e}")
        raise UpstreamDependencyError("supabase", str(e)) from e

    return CardsResponse(type=card_type, cards=cards)
