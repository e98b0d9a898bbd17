"""Shared FastAPI dependencies."""

from fastapi import Request

from fr8coach.core.config import Settings


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings
