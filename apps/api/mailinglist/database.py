"""Database engine and session management for the mailing list."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mailinglist.config import get_settings
from mailinglist.models import Base
from mailinglist.utils.logging import get_logger

logger = get_logger(__name__)


def to_async_url(database_url: str) -> str:
    """Convert a sync database URL to its async driver form.

    postgresql://... -> postgresql+asyncpg://...
    sqlite://...     -> sqlite+aiosqlite://...
    """
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


settings = get_settings()

# One engine (connection pool) shared by every request
async_engine = create_async_engine(
    to_async_url(settings.database_url),
    echo=settings.debug,
)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create the emails table if it does not exist yet.

    Safe to call on every startup; an existing table is left untouched.
    Connection errors propagate so that startup fails fast.

    Args:
        engine: Engine to use (defaults to the application engine)
    """
    engine = engine or async_engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info(f"Database ready: {engine.url.render_as_string(hide_password=True)}")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session for dependency injection."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
