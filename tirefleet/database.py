import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _is_memory_url(url: str) -> bool:
    return ":memory:" in url or url.rstrip("/").endswith("sqlite:")


class Database:
    """Owns the async engine and session factory for one backing store.

    Constructed explicitly at startup and closed on shutdown; nothing in the
    package keeps a module-level engine.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self._is_sqlite = url.startswith("sqlite")
        self._in_memory = self._is_sqlite and _is_memory_url(url)
        kwargs: dict = {"echo": echo}
        if self._is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
        if self._in_memory:
            # One shared connection, otherwise every session sees an empty db
            kwargs["poolclass"] = StaticPool
        self.engine: AsyncEngine = create_async_engine(url, **kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def init(self) -> None:
        """Create all tables and enable WAL mode on file-backed SQLite."""
        from tirefleet.models import Tire, Transaction, Vehicle  # noqa: F401 - ensure models are registered
        from tirefleet.models.base import Base

        async with self.engine.begin() as conn:
            if self._is_sqlite and not self._in_memory:
                await conn.execute(text("PRAGMA journal_mode=WAL"))
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database ready at %s", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.engine.dispose()
