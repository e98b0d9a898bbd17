"""SerpAPI service for Google search queries."""

import logging
from typing import Any

import httpx

from fr8coach.core.config import Settings

logger = logging.getLogger(__name__)

SERPAPI_BASE_URL = "https://serpapi.com/search"


async def search_google(
    settings: Settings,
    query: str,
    num_results: int = 10,
) -> list[dict[str, Any]]:
    """
    Search Google via SerpAPI.

    Args:
        settings: Application settings holding SERPAPI_API_KEY
        query: Search query string
        num_results: Number of results to return

    Returns:
        List of result dicts with link, title, snippet

    Raises:
        ValueError: If SERPAPI_API_KEY not configured
        httpx.HTTPStatusError: If the API request fails
    """
    if not settings.SERPAPI_API_KEY:
        raise ValueError("SERPAPI_API_KEY not configured")

    async with httpx.AsyncClient(timeout=settings.SEARCH_TIMEOUT_SECONDS) as client:
        response = await client.get(
            SERPAPI_BASE_URL,
            params={
                "api_key": settings.SERPAPI_API_KEY,
                "q": query,
                "num": num_results,
                "engine": "google",
            },
        )
        response.raise_for_status()

        data = response.json()
        organic = data.get("organic_results") or []

        results = []
        for item in organic[:num_results]:
            results.append({
                "link": item.get("link", ""),
                "title": item.get("title", ""),
                "snippet": item.get("snippet", ""),
            })

        logger.info(f"SerpAPI search '{query[:50]}': {len(results)} results")
        return results
