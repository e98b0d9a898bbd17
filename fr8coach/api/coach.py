"""Coaching chat API endpoints."""

from fastapi import APIRouter, Depends

from fr8coach.api.deps import get_app_settings
from fr8coach.core.coach_pipeline import coach_reply
from fr8coach.core.config import Settings
from fr8coach.core.exceptions import RequestValidationFailed
from fr8coach.core.logging import get_logger
from fr8coach.core.schemas_coach import CoachRequest, CoachResponse

logger = get_logger(__name__)

router = APIRouter()


@router.get("/ping")
async def ping() -> dict[str, bool]:
    """Password check for the browser gate; only reachable with a valid credential."""
    return {"ok": True}


@router.post("/coach", response_model=CoachResponse)
async def coach(
    request: CoachRequest,
    settings: Settings = Depends(get_app_settings),
) -> CoachResponse:
    """
    Answer a rep's question with retrieved notes, contacts and recent history.

    Args:
        request: Prompt, optional history and optional user email
        settings: Application settings

    Returns:
        CoachResponse with the reply text
    """
    prompt = (request.prompt or "").strip()
    if not prompt:
        raise RequestValidationFailed("prompt is required", field="prompt")

    reply = await coach_reply(prompt, request.history, settings, user_email=request.user_email)
    return CoachResponse(reply=reply)
