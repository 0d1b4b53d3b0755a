"""
One-shot schema initialization.

Tables are created with CREATE TABLE IF NOT EXISTS semantics the first time
anything asks for the database, and never again for the life of the process.
The work runs as a single memoized task:

  - the first caller of ensure_db_ready() schedules it
  - every caller, concurrent or later, awaits that same task
  - a failure is cached as well; later callers see the same SchemaInitError
    until reset_db_ready() is called (in practice, a process restart)

Waiters are shielded from each other: cancelling one request does not cancel
the shared initialization.
"""

import asyncio
from typing import Awaitable, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from protest_tracker.core.logging import get_logger
from protest_tracker.core.metrics import record_schema_init
from protest_tracker.db.base import Base

logger = get_logger(__name__)

_init_task: Optional[asyncio.Task] = None


class SchemaInitError(RuntimeError):
    """Raised when the tables could not be created."""


async def create_tables(engine: AsyncEngine) -> None:
    # Registers the tables on Base.metadata
    from protest_tracker import models  # noqa: F401

    logger.info("schema_init_started", url=engine.url.render_as_string(hide_password=True))
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        record_schema_init(success=False)
        logger.error("schema_init_failed", error=str(e))
        raise SchemaInitError(f"Database initialization failed: {e}") from e

    record_schema_init(success=True)
    logger.info("schema_init_completed", tables=sorted(Base.metadata.tables))


def ensure_db_ready(engine: Optional[AsyncEngine] = None) -> Awaitable[None]:
    """
    Return an awaitable that resolves once the schema exists.

    Must be called from within a running event loop.
    """
    global _init_task

    if _init_task is None:
        if engine is None:
            from protest_tracker.db.session import engine as default_engine

            engine = default_engine
        _init_task = asyncio.ensure_future(create_tables(engine))

    return asyncio.shield(_init_task)


def reset_db_ready() -> None:
    """Forget the memoized outcome so the next caller runs initialization again."""
    global _init_task
    _init_task = None


def is_db_ready() -> bool:
    return (
        _init_task is not None
        and _init_task.done()
        and not _init_task.cancelled()
        and _init_task.exception() is None
    )
