"""API router for protected /api endpoints."""

from fastapi import APIRouter

from fr8coach.api import cards, coach

router = APIRouter()

# Coaching chat and password check
router.include_router(coach.router, tags=["coach"])

# Sales / ops cards
router.include_router(cards.router, tags=["cards"])
