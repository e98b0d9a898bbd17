"""Explicit Settings for tests, independent of the process environment."""

from fr8coach.core.config import Settings

TEST_PASSWORD = "test-password"
AUTH_HEADERS = {"x-site-password": TEST_PASSWORD}


def make_settings(**overrides) -> Settings:
    values = {
        "SITE_USER": "user",
        "SITE_PASSWORD": TEST_PASSWORD,
        "SUPABASE_URL": "https://test.supabase.co",
        "SUPABASE_SERVICE_ROLE_KEY": "test-key",
        "OPENAI_API_KEY": "test-openai-key",
        "SERPAPI_API_KEY": "test-serp-key",
        "FR8_ENV": "test",
        "TENANT_LABELS": {},
    }
    values.update(overrides)
    return Settings(**values)
