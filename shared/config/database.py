import functools
from typing import AsyncIterator, Callable, Optional

import structlog
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from shared.errors import StorageUnavailable
from shared.observability.metrics import marketplace_storage_unavailable_total

logger = structlog.get_logger(__name__)

Base = declarative_base()


class Database:
    """Storage handle built once at startup and passed to whoever needs it.

    A handle built without a URL is "unavailable": ``session()`` raises
    ``StorageUnavailable`` and the request dependency yields ``None`` so that
    repository reads can degrade instead of crashing.
    """

    def __init__(self, url: Optional[str], echo: bool = False):
        self.url = url
        self.engine = None
        self._sessionmaker = None
        if url:
            self.engine = create_async_engine(url, echo=echo)
            self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    @property
    def available(self) -> bool:
        return self.engine is not None

    def session(self) -> AsyncSession:
        if not self.available:
            raise StorageUnavailable()
        return self._sessionmaker()

    async def create_all(self) -> None:
        if not self.available:
            logger.warning("storage_unavailable", operation="create_all")
            return
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[Optional[AsyncSession]]:
    database: Database = request.app.state.db
    if not database.available:
        yield None
        return
    async with database.session() as session:
        yield session


def degrades_to(default_factory: Callable):
    """Read operations: return ``default_factory()`` when the session is None."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(db, *args, **kwargs):
            if db is None:
                marketplace_storage_unavailable_total.labels(operation=func.__name__).inc()
                logger.warning("storage_unavailable", operation=func.__name__, degraded=True)
                return default_factory()
            return await func(db, *args, **kwargs)

        return wrapper

    return decorator


def requires_storage(func):
    """Write operations: fail loudly when the session is None."""

    @functools.wraps(func)
    async def wrapper(db, *args, **kwargs):
        if db is None:
            marketplace_storage_unavailable_total.labels(operation=func.__name__).inc()
            logger.error("storage_unavailable", operation=func.__name__, degraded=False)
            raise StorageUnavailable(f"Cannot {func.__name__.replace('_', ' ')}: storage is not configured")
        return await func(db, *args, **kwargs)

    return wrapper
