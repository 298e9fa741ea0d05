"""NeuraCare FastAPI application."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from neuracare import __version__
from neuracare.config import settings
from neuracare.database import get_store
from neuracare.exceptions import PayloadValidationError
from neuracare.logging_config import get_logger, setup_logging
from neuracare.middleware import CORRELATION_ID_HEADER, CorrelationIdMiddleware
from neuracare.routers import ai, analysis, consent, health, profile
from neuracare.services.ai_failover import get_failover_client

setup_logging(
    log_format=settings.log_format,
    log_level=settings.log_level,
    service_name=settings.service_name,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    store = get_store()
    logger.info(
        "NeuraCare API started",
        db_path=str(store.path),
        ai_providers=get_failover_client().providers,
    )

    yield

    logger.info("NeuraCare API shutdown complete")


app = FastAPI(
    title="NeuraCare API",
    description="Burnout analysis for short written reflections",
    version=__version__,
    lifespan=lifespan,
)

# Middleware (order matters: first added = last executed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_origin],
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
    expose_headers=[CORRELATION_ID_HEADER],
)
app.add_middleware(CorrelationIdMiddleware)


def _describe_error(error: dict[str, Any]) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    field = loc[-1] if loc else "body"
    message = error.get("msg", "invalid value").removeprefix("Value error, ")
    return f"{field}: {message}"


@app.exception_handler(PayloadValidationError)
async def payload_error_handler(
    request: Request, exc: PayloadValidationError
) -> JSONResponse:
    """Report payload problems as 400 with one line per failing field."""
    logger.info("Rejected invalid payload", path=request.url.path, errors=exc.errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request payload", "errors": exc.errors},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """FastAPI's 422 becomes the same 400 as PayloadValidationError."""
    errors = [_describe_error(error) for error in exc.errors()]
    return await payload_error_handler(request, PayloadValidationError(errors))


app.include_router(health.router)
app.include_router(analysis.router)
app.include_router(profile.router)
app.include_router(consent.router)
app.include_router(ai.router)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint."""
    return {
        "name": "NeuraCare API",
        "version": __version__,
        "docs": "/docs",
    }
