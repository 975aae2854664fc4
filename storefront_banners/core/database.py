from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from storefront_banners.config import settings


def _engine_kwargs(url: str, pool_size: int, max_overflow: int) -> dict[str, Any]:
    """Pool and driver options for the configured backend.

    SQLite (local development) takes no pool sizing or asyncpg options.
    """
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,  # Detects stale connections before use
        "pool_recycle": 300,  # Pooler compatibility
        "pool_timeout": 30,
        "connect_args": {
            # Transaction poolers don't support prepared statements
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
            "command_timeout": 60,
        },
    }


# Pooled connection for request handling
engine = create_async_engine(
    settings.database_url,
    echo=False,
    future=True,
    **_engine_kwargs(
        settings.database_url,
        settings.database_pool_size,
        settings.database_max_overflow,
    ),
)

# Direct connection for DDL (table creation in debug mode)
direct_engine = create_async_engine(
    settings.database_url_direct,
    echo=False,
    future=True,
    **_engine_kwargs(settings.database_url_direct, pool_size=3, max_overflow=5),
)

async_session_maker = sessionmaker(  # type: ignore[call-overload]
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an async database session.

    One session per request: committed when the handler returns,
    rolled back if it raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables (for development only - use Alembic in production)."""
    # Register table models on the metadata before create_all
    import storefront_banners.models  # noqa: F401

    async with direct_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
