"""Public profile lookup for people at a detected company.

Optional enrichment: without a SerpAPI key or a company candidate it returns
an empty result, and any search failure is reported as an error result
rather than raised.
"""

import re

import httpx

from fr8coach.core.config import Settings
from fr8coach.core.enrichment import EnrichmentResult
from fr8coach.core.logging import get_logger
from fr8coach.core.schemas_coach import ContactRecord
from fr8coach.core.serpapi_service import search_google

logger = get_logger(__name__)

PROFILE_SITE = "linkedin.com/in"
PROFILE_URL_RE = re.compile(r"^https?://(?:[a-z]{2,3}\.)?linkedin\.com/in/[^/?#]+", re.IGNORECASE)
ROLE_CLAUSE = (
    '(logistics OR procurement OR "supply chain" OR transportation OR shipping '
    'OR freight OR "distribution")'
)
_BRAND_SUFFIX_RE = re.compile(r"\s*[|\-–]\s*LinkedIn\s*$", re.IGNORECASE)
_LEADING_ARTICLE_RE = re.compile(r"^the\s+", re.IGNORECASE)


def build_contact_query(company: str) -> str:
    """Site-restricted, role-filtered search query for a company."""
    return f'site:{PROFILE_SITE} "{company}" {ROLE_CLAUSE}'


def clean_profile_title(title: str) -> str:
    """Strip the hosting site's branding suffix from a result title."""
    return _BRAND_SUFFIX_RE.sub("", title or "").strip()


def _to_contacts(results: list[dict], max_results: int) -> list[ContactRecord]:
    contacts: list[ContactRecord] = []
    seen: set[str] = set()
    for item in results:
        link = (item.get("link") or "").strip()
        if not PROFILE_URL_RE.match(link) or link in seen:
            continue
        seen.add(link)
        contacts.append(
            ContactRecord(title=clean_profile_title(item.get("title", "")), profile_url=link)
        )
        if len(contacts) >= max_results:
            break
    return contacts


async def _search_contacts(
    settings: Settings, company: str, max_results: int
) -> list[ContactRecord]:
    # Over-fetch because non-profile links are filtered out
    query = build_contact_query(company)
    results = await search_google(settings, query, num_results=max_results * 2)
    return _to_contacts(results, max_results)


async def find_contacts(
    settings: Settings,
    company: str | None,
    max_results: int = 5,
) -> EnrichmentResult[ContactRecord]:
    """
    Find public profiles of logistics/procurement people at a company.

    Retries once without a leading "The" when the first search finds nothing.

    Args:
        settings: Application settings
        company: Normalized company candidate, or None
        max_results: Max contacts to return

    Returns:
        EnrichmentResult with ContactRecord items
    """
    if not company or not settings.search_configured or max_results <= 0:
        return EnrichmentResult.empty()

    try:
        contacts = await _search_contacts(settings, company, max_results)

        stripped = _LEADING_ARTICLE_RE.sub("", company).strip()
        if not contacts and stripped and stripped != company:
            logger.debug(f"No contacts for '{company}', retrying as '{stripped}'")
            contacts = await _search_contacts(settings, stripped, max_results)
    except httpx.HTTPStatusError as e:
        return EnrichmentResult.error(f"SerpAPI HTTP error for '{company}': {e.response.status_code}")
    except httpx.TimeoutException:
        return EnrichmentResult.error(f"SerpAPI timeout for '{company}'")
    except Exception as e:
        return EnrichmentResult.error(f"SerpAPI error for '{company}': {e}")

    logger.info(f"Found {len(contacts)} contacts for '{company}'")
    return EnrichmentResult.ok(contacts)
