"""
FastAPI application entry point.

The lifespan validates the environment before anything else starts.
uvicorn runs lifespan startup before binding its sockets, so an invalid
environment aborts the process with a non-zero exit status without ever
listening. It then creates the shared upstream HTTP client and registers
the routers.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bridge.config import LogLevel, get_configuration, get_environment
from bridge.routes.health import router as health_router
from bridge.services.upstream import close_upstream_client, open_upstream_client
from bridge.startup import configure_logging, ensure_valid_environment

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
configure_logging(get_configuration().log_level)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown events."""
    # Startup
    configuration = get_configuration()
    logger.info(
        "Starting Monday.com Claude bridge in %s mode …",
        configuration.environment.value,
    )
    ensure_valid_environment(get_environment(), configuration)
    open_upstream_client()
    logger.info("Application is ready (region %s).", configuration.region.value)

    yield

    # Shutdown
    logger.info("Shutting down …")
    await close_upstream_client()
    logger.info("Shutdown complete.")


# ---------------------------------------------------------------------------
# FastAPI app instance
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Monday.com Claude Bridge",
    description=(
        "Backend-for-frontend connecting a Monday.com app "
        "to the Claude API."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# CORS: the frontend is served from Monday.com origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)


# ---------------------------------------------------------------------------
# Global exception handler
# ---------------------------------------------------------------------------

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler so unhandled errors return structured JSON."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal server error occurred. Please try again later."},
    )


# ---------------------------------------------------------------------------
# Server entry point
# ---------------------------------------------------------------------------

# uvicorn spells "warn" as "warning"
_UVICORN_LOG_LEVELS = {LogLevel.WARN: "warning"}


def serve() -> None:
    """Run the application with uvicorn on the configured port."""
    configuration = get_configuration()
    logger.info("Server port: %d", configuration.port)
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=configuration.port,
        log_level=_UVICORN_LOG_LEVELS.get(configuration.log_level, configuration.log_level.value),
    )


if __name__ == "__main__":
    serve()
