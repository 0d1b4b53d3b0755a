"""
Async engine, session factory and the request-scoped session dependency.

The engine owns a bounded connection pool shared by every request. A session
checks a connection out lazily on its first statement and hands it back when
the session closes, on both the success and the failure path.
"""

from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from protest_tracker.core.config import Settings, get_settings

settings = get_settings()


def build_engine(settings: Settings) -> AsyncEngine:
    url = make_url(settings.DATABASE_URL)
    connect_args = {"timeout": settings.DB_CONNECT_TIMEOUT}
    options = {}

    # SQLite (tests, local runs) picks its own pool class
    if url.get_backend_name().startswith("postgresql"):
        if settings.DB_SSL:
            connect_args["ssl"] = "require"
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )

    return create_async_engine(
        url,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        connect_args=connect_args,
        **options,
    )


engine = build_engine(settings)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed if the handler succeeds."""
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
