"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mailinglist.config import get_settings
from mailinglist.database import async_engine, create_tables
from mailinglist.routers.emails import router as emails_router
from mailinglist.utils.addr import parse_api_addr
from mailinglist.utils.logging import configure_logging, get_logger

settings = get_settings()

# Configure logging (must be called before other modules use loggers)
configure_logging(debug=settings.debug)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the emails table on startup and dispose the pool on shutdown.

    A database that cannot be reached aborts startup.
    """
    await create_tables()
    yield
    await async_engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Include routers
app.include_router(emails_router, prefix="/api")


@app.get("/")
async def root() -> dict:
    """Return application information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Serve the API with uvicorn on the configured address."""
    import uvicorn

    host, port = parse_api_addr(settings.api_addr)
    logger.info(f"Starting {settings.app_name} on {host}:{port}")
    uvicorn.run(
        "mailinglist.main:app",
        host=host,
        port=port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
