"""
api/main.py -- FastAPI application entry point for CarManager.

Run with:      uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one log line per request with status and latency

Lifespan handles startup (stores, services, optional seed administrator) and
shutdown (dispose DB engines) symmetrically.

Error mapping (core/errors.py -> HTTP):
  RequestValidationError -> 400 malformed_input / validation_error
  ValidationFailed       -> 400 validation_error with the full message list
  InvalidArgument        -> 400 invalid_argument
  Unauthenticated        -> 401, empty body
  NotFound               -> 404 not_found
  Conflict               -> 409 conflict
  anything else          -> 500 internal_error (details only in the log)
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.administrators import router as administrators_router
from api.routes.vehicles import router as vehicles_router
from auth.models import Role
from auth.service import AdministratorService
from auth.store import AdministratorStore
from core.config import get_settings
from core.errors import Conflict, DuplicateKey, InvalidArgument, NotFound, Unauthenticated, ValidationFailed
from fleet.service import VehicleService
from fleet.store import VehicleStore

API_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("carmanager.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application-level resources across the full server lifetime.

    Everything before yield runs on startup; everything after yield runs on
    shutdown. Both stores point at the same DATABASE_URL.
    """
    settings = get_settings()
    logger.info("CarManager API starting up")

    app.state.administrator_store = AdministratorStore(db_url=settings.database_url)
    app.state.vehicle_store = VehicleStore(db_url=settings.database_url)
    app.state.administrator_service = AdministratorService(
        app.state.administrator_store, clamp_pagination=settings.clamp_pagination
    )
    app.state.vehicle_service = VehicleService(app.state.vehicle_store, clamp_pagination=settings.clamp_pagination)
    logger.info("Stores initialized (clamp_pagination=%s)", settings.clamp_pagination)

    app.state.administrator_service.ensure_seed_administrator(
        settings.seed_admin_email,
        settings.seed_admin_password,
        Role.parse(settings.seed_admin_role),
    )

    yield

    app.state.administrator_store.close()
    app.state.vehicle_store.close()
    logger.info("CarManager API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="CarManager API",
    description="Administrator authentication and vehicle fleet management.",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Wall-clock time before and after call_next gives the latency.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    # Set by require_session on guarded routes.
    session = getattr(request.state, "session", None)
    logger.info(
        "%s %s %d %.1fms %s %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
        session.email if session is not None else "-",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(administrators_router, tags=["Administrators"])
app.include_router(vehicles_router, tags=["Vehicles"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers except Unauthenticated return the same ErrorResponse envelope
# so API clients can parse errors uniformly.
# ---------------------------------------------------------------------------


def _error(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, **extra)).model_dump(exclude_none=True),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the body cannot be parsed or does not match the expected shape."""
    errors = exc.errors()
    messages = [f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in errors]
    if any(err.get("type") == "json_invalid" for err in errors):
        return _error(400, "malformed_input", "Request body is not valid JSON.", messages=messages)
    return _error(400, "validation_error", "Request validation failed.", messages=messages)


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return _error(400, "validation_error", "Request validation failed.", messages=exc.messages)


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
    return _error(400, "invalid_argument", str(exc))


@app.exception_handler(Unauthenticated)
async def unauthenticated_handler(request: Request, exc: Unauthenticated) -> Response:
    """Bare 401. No body, so nothing distinguishes the cause of the rejection."""
    return Response(
        status_code=401,
        headers={"WWW-Authenticate": "Bearer", "Cache-Control": "no-store"},
    )


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return _error(404, "not_found", str(exc))


@app.exception_handler(Conflict)
async def conflict_handler(request: Request, exc: Conflict) -> JSONResponse:
    detail = exc.email if isinstance(exc, DuplicateKey) else None
    return _error(409, "conflict", str(exc), detail=detail)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Structured error for framework-raised HTTP errors (unknown route, wrong method)."""
    return _error(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Home and health
# ---------------------------------------------------------------------------


@app.get("/", include_in_schema=False)
async def home() -> RedirectResponse:
    """Send browsers to the interactive API documentation."""
    return RedirectResponse("/docs")


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version. No authentication."""
    return HealthResponse(version=API_VERSION)
