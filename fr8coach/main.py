"""FastAPI application entry point."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fr8coach.api import router as api_router
from fr8coach.core.config import Settings, get_settings
from fr8coach.core.credential_gate import CredentialGateMiddleware
from fr8coach.core.exceptions import CoachException
from fr8coach.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def coach_exception_handler(request: Request, exc: CoachException) -> JSONResponse:
    """Render fr8coach errors as {"error": message}; details stay in the logs."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message} details={exc.details}")
    else:
        logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are 400s in the same {"error": ...} shape."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info(f"Validation error on {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application around one Settings instance.

    Args:
        settings: Settings to use (defaults to environment-loaded settings)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="fr8coach",
        description="Password-gated freight brokerage coaching gateway",
        version="0.1.0",
    )
    app.state.settings = settings or get_settings()
    configure_logging(app.state.settings)

    # Wraps every route, including ones registered after this call
    app.add_middleware(CredentialGateMiddleware)

    app.add_exception_handler(CoachException, coach_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "ok"}, status_code=200)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
