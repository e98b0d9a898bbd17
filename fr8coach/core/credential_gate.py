"""Site-wide password gate.

Runs as middleware around the whole application so that every route is
covered regardless of router registration order. Only the liveness route is
exempt.

Accepted credentials:
1. ``Authorization: Basic base64(SITE_USER:SITE_PASSWORD)`` (browser prompt)
2. ``x-site-password: SITE_PASSWORD`` (front-end fetch shim)
"""

import base64
import binascii
import secrets
from collections.abc import Mapping

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from fr8coach.core.config import Settings
from fr8coach.core.exceptions import AuthenticationError, CoachException, ConfigurationError
from fr8coach.core.logging import get_logger

logger = get_logger(__name__)

EXEMPT_PATHS = frozenset({"/health"})
PASSWORD_HEADER = "x-site-password"
REALM = 'Basic realm="fr8coach"'


def _matches(presented: str, expected: str) -> bool:
    return secrets.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def _decode_basic(authorization: str) -> tuple[str, str] | None:
    """Split a Basic header into (user, password), or None if malformed."""
    if not authorization.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(authorization[6:].strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return user, password


def check_credential(headers: Mapping[str, str], settings: Settings) -> None:
    """
    Allow or reject a request based on its headers.

    Args:
        headers: Request headers (case-insensitive mapping)
        settings: Application settings holding the site credential

    Raises:
        ConfigurationError: If SITE_PASSWORD is not configured (fail closed)
        AuthenticationError: If no presented credential matches
    """
    if not settings.gate_configured:
        raise ConfigurationError("Server not configured: SITE_PASSWORD is missing.")

    header_password = headers.get(PASSWORD_HEADER)
    if header_password is not None and _matches(header_password, settings.SITE_PASSWORD):
        return

    basic = _decode_basic(headers.get("authorization") or "")
    if basic is not None:
        user, password = basic
        # Evaluate both comparisons so timing does not reveal which one failed
        user_ok = _matches(user, settings.SITE_USER)
        password_ok = _matches(password, settings.SITE_PASSWORD)
        if user_ok and password_ok:
            return

    raise AuthenticationError()


class CredentialGateMiddleware(BaseHTTPMiddleware):
    """Reject unauthenticated requests before they reach any route."""

    def __init__(self, app: ASGIApp, exempt_paths: frozenset[str] = EXEMPT_PATHS) -> None:
        super().__init__(app)
        self.exempt_paths = exempt_paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        settings: Settings = request.app.state.settings
        try:
            check_credential(request.headers, settings)
        except CoachException as e:
            if isinstance(e, ConfigurationError):
                logger.error(f"Rejecting {request.url.path}: {e.message}")
            else:
                logger.info(f"Rejected unauthenticated request to {request.url.path}")
            headers = {"WWW-Authenticate": REALM} if isinstance(e, AuthenticationError) else None
            return JSONResponse(
                status_code=e.status_code, content={"error": e.message}, headers=headers
            )

        return await call_next(request)
