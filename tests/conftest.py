"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient

from fr8coach.main import create_app
from tests.fakes.fake_settings import TEST_PASSWORD, make_settings


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SITE_PASSWORD"] = TEST_PASSWORD
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["FR8_ENV"] = "test"


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings), raise_server_exceptions=False)
