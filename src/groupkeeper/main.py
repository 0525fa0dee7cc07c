"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from groupkeeper import database
from groupkeeper.api.routes import accounts, auth, groups
from groupkeeper.config import get_settings
from groupkeeper.core.errors import GroupkeeperError, UnauthorizedError
from groupkeeper.core.logging import setup_logging
from groupkeeper.services.account_service import ensure_bootstrap_account
from groupkeeper.telemetry import TelemetryManager

# Get settings
settings = get_settings()

# Configure logging
setup_logging(settings)
logger = logging.getLogger(__name__)

# Initialize telemetry
telemetry_manager = TelemetryManager(settings)
telemetry_manager.setup()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting %s", settings.app_name)

    database.init_db(settings)
    database.create_tables()
    logger.info("Database initialized")

    db = database.SessionLocal()
    try:
        ensure_bootstrap_account(db, settings)
    finally:
        db.close()

    yield

    telemetry_manager.shutdown()
    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title="Groupkeeper",
    description="Accounts and groups with role-gated bearer authentication",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.otel_enabled:
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

    FastAPIInstrumentor.instrument_app(app)
    logger.info("FastAPI instrumented with OpenTelemetry")

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(accounts.router, prefix="/api")
app.include_router(groups.router, prefix="/api")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.exception_handler(GroupkeeperError)
async def groupkeeper_exception_handler(request: Request, exc: GroupkeeperError):
    """Map domain errors to their HTTP status."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s on %s %s", exc.detail, request.method, request.url.path, exc_info=exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "groupkeeper.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
