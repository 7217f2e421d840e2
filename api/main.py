"""
api/main.py -- FastAPI application entry point for TokenGate.

Issues signed session tokens on login and checks them on every protected
request. No server-side session state: everything needed to authenticate a
request travels inside its Bearer token.

Run with:  python main.py
           uvicorn api.main:app --reload

Lifespan loads Settings (which enforces the JWT_SECRET policy) and builds the
credential store before the first request arrives.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, NotFoundResponse, RootResponse
from api.routes.auth import router as auth_router
from api.routes.protected import router as protected_router
from api.routes.public import router as public_router
from auth.store import DEMO_USER, StaticCredentialStore
from core.config import get_settings

VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("tokengate.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load configuration and the credential store; log the startup banner.

    get_settings() raises in production when JWT_SECRET is unset or weak, which
    aborts startup before any request is served.
    """
    settings = get_settings()
    app.state.settings = settings
    app.state.credential_store = StaticCredentialStore(DEMO_USER)

    logger.info("=" * 60)
    logger.info("TokenGate %s starting (environment=%s)", VERSION, settings.environment)
    logger.info(
        "JWT_SECRET: %s",
        "USING DEFAULT (CHANGE THIS!)" if settings.using_default_secret else "Using environment variable",
    )
    logger.info("Token lifetime: %ds", settings.token_expire_seconds)
    logger.info("=" * 60)

    yield

    logger.info("TokenGate shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="TokenGate",
    description="Issues and verifies signed session tokens for a small set of protected routes.",
    version=VERSION,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Wall-clock time before and after call_next gives per-response
# latency. The Authorization header is never logged.
# ---------------------------------------------------------------------------


def _log_access(request: Request, status_code: int, started: float) -> None:
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        status_code,
        (time.perf_counter() - started) * 1000,
        request.client.host if request.client else "unknown",
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Write one access line per request, including requests that end in a 500.

    An unhandled exception is logged as status 500 and re-raised so
    generic_exception_handler still renders the response body.
    """
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        _log_access(request, 500, started)
        raise
    _log_access(request, response.status_code, started)
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(protected_router, prefix="/api", tags=["Protected"])
app.include_router(public_router, prefix="/api", tags=["Public"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error body is a flat JSON object with at least a "message" key so
# clients can show it without inspecting status codes first.
# ---------------------------------------------------------------------------


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP exceptions, including unmatched routes.

    Registered on Starlette's HTTPException so it also catches the 404/405 the
    router raises itself. A path that exists under a different method counts
    as not found. When detail is already a structured dict (the request gate
    raises those) it becomes the body as-is.
    """
    if exc.status_code in (404, 405) and not isinstance(exc.detail, dict):
        return JSONResponse(
            status_code=404,
            content=NotFoundResponse(
                message="Endpoint not found",
                path=request.url.path,
                method=request.method,
            ).model_dump(),
        )
    if isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(code=f"http_{exc.status_code}", message=str(exc.detail)).model_dump(exclude_none=True),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the request body cannot be parsed into its model.

    Only locations and messages are echoed back, never the submitted input,
    which may contain a password.
    """
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            code="validation_error",
            message="Request validation failed.",
            error=problems or None,
        ).model_dump(exclude_none=True),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The exception message is included in the body only when
    ENVIRONMENT=development. Elsewhere it goes to the log and nowhere else.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    detail = str(exc) if get_settings().is_development else None
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            code="internal_error",
            message="Internal server error",
            error=detail,
        ).model_dump(exclude_none=True),
    )


# ---------------------------------------------------------------------------
# Service banner
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state.
# ---------------------------------------------------------------------------


@app.get("/", tags=["Health"])
async def root() -> RootResponse:
    """Return the service banner and the list of endpoints."""
    return RootResponse(
        message="TokenGate JWT Protected Routes Server",
        version=VERSION,
        endpoints=[
            "POST /api/login - Get JWT token",
            "GET /api/profile - Get user profile (protected)",
            "GET /api/user-data - Get protected user data (protected)",
            "GET /api/info - Public information",
        ],
    )
