"""Tests for the SerpAPI-backed contact finder."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from fr8coach.core.contact_finder import (
    build_contact_query,
    clean_profile_title,
    find_contacts,
)
from fr8coach.core.enrichment import EnrichmentStatus
from tests.fakes.fake_settings import make_settings

PROFILE = "https://www.linkedin.com/in/jane-doe-123"


def _result(link, title="Jane Doe - Logistics Manager - Acme Corp | LinkedIn"):
    return {"link": link, "title": title, "snippet": ""}


class TestQueryAndTitles:
    def test_query_has_site_company_and_roles(self):
        query = build_contact_query("Acme Corp")
        assert query.startswith("site:linkedin.com/in")
        assert '"Acme Corp"' in query
        assert "procurement" in query
        assert '"supply chain"' in query

    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Jane Doe - Logistics Manager | LinkedIn", "Jane Doe - Logistics Manager"),
            ("Jane Doe - Buyer - LinkedIn", "Jane Doe - Buyer"),
            ("Jane Doe", "Jane Doe"),
        ],
    )
    def test_clean_profile_title(self, title, expected):
        assert clean_profile_title(title) == expected


class TestFindContacts:
    @pytest.mark.asyncio
    async def test_filters_to_profile_links(self, settings):
        results = [
            _result(PROFILE),
            _result("https://www.linkedin.com/company/acme"),
            _result("https://acme.com/team"),
            _result(PROFILE),
        ]
        with patch(
            "fr8coach.core.contact_finder.search_google", new=AsyncMock(return_value=results)
        ):
            result = await find_contacts(settings, "Acme Corp", max_results=5)

        assert result.is_ok
        assert len(result.items) == 1
        assert result.items[0].profile_url == PROFILE
        assert result.items[0].title == "Jane Doe - Logistics Manager - Acme Corp"

    @pytest.mark.asyncio
    async def test_caps_results(self, settings):
        results = [_result(f"https://linkedin.com/in/person-{i}") for i in range(10)]
        with patch(
            "fr8coach.core.contact_finder.search_google", new=AsyncMock(return_value=results)
        ):
            result = await find_contacts(settings, "Acme Corp", max_results=3)
        assert len(result.items) == 3

    @pytest.mark.asyncio
    async def test_retries_without_leading_the(self, settings):
        search = AsyncMock(side_effect=[[], [_result(PROFILE)]])
        with patch("fr8coach.core.contact_finder.search_google", new=search):
            result = await find_contacts(settings, "The Home Depot Inc", max_results=5)

        assert result.is_ok
        assert search.await_count == 2
        second_query = search.await_args_list[1].args[1]
        assert '"Home Depot Inc"' in second_query

    @pytest.mark.asyncio
    async def test_empty_after_retry_returns_empty_list(self, settings):
        search = AsyncMock(return_value=[])
        with patch("fr8coach.core.contact_finder.search_google", new=search):
            result = await find_contacts(settings, "The Widget Co", max_results=5)

        assert result.status == EnrichmentStatus.EMPTY
        assert result.items == []
        assert search.await_count == 2

    @pytest.mark.asyncio
    async def test_no_retry_without_article(self, settings):
        search = AsyncMock(return_value=[])
        with patch("fr8coach.core.contact_finder.search_google", new=search):
            result = await find_contacts(settings, "Acme Corp", max_results=5)
        assert result.items == []
        assert search.await_count == 1

    @pytest.mark.asyncio
    async def test_http_error_is_swallowed(self, settings):
        response = MagicMock(status_code=503)
        error = httpx.HTTPStatusError("boom", request=MagicMock(), response=response)
        with patch(
            "fr8coach.core.contact_finder.search_google", new=AsyncMock(side_effect=error)
        ):
            result = await find_contacts(settings, "Acme Corp")

        assert result.is_error
        assert "503" in result.reason
        assert result.items == []

    @pytest.mark.asyncio
    async def test_timeout_is_swallowed(self, settings):
        with patch(
            "fr8coach.core.contact_finder.search_google",
            new=AsyncMock(side_effect=httpx.ReadTimeout("slow")),
        ):
            result = await find_contacts(settings, "Acme Corp")
        assert result.is_error

    @pytest.mark.asyncio
    async def test_skipped_without_company_or_key(self, settings):
        search = AsyncMock()
        with patch("fr8coach.core.contact_finder.search_google", new=search):
            no_company = await find_contacts(settings, None)
            no_key = await find_contacts(make_settings(SERPAPI_API_KEY=""), "Acme Corp")

        assert no_company.status == EnrichmentStatus.EMPTY
        assert no_key.status == EnrichmentStatus.EMPTY
        search.assert_not_awaited()
