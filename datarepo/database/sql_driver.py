from typing import AsyncIterator, Iterator, Optional
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session, create_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from datarepo.config import to_async_url
from datarepo.logging.logger import get_logger
from .base import BaseDatabaseDriver

logger = get_logger("sql_driver")


class SQLDriver(BaseDatabaseDriver):
    """Sync and async SQLAlchemy engines bound to the same database."""

    def __init__(
        self,
        url: str,
        async_url: Optional[str] = None,
        echo: bool = False,
        engine: Optional[Engine] = None,
        async_engine: Optional[AsyncEngine] = None,
    ):
        self.url = url
        self.async_url = async_url or to_async_url(url)
        self.engine = engine or create_engine(url, echo=echo)
        self.async_engine = async_engine or create_async_engine(
            self.async_url, echo=echo, future=True
        )
        # expire_on_commit=False keeps returned entities readable after commit
        self.session_factory = sessionmaker(
            self.engine, class_=Session, expire_on_commit=False
        )
        self.async_session_factory = sessionmaker(
            self.async_engine, class_=AsyncSession, expire_on_commit=False
        )

    async def connect(self):
        """Ping the database through the async engine."""
        async with self.async_engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info(f"Connected to {self.async_engine.url.render_as_string(hide_password=True)}")

    async def disconnect(self):
        """Dispose both engines and their connection pools."""
        await self.async_engine.dispose()
        self.engine.dispose()
        logger.info("Database engines disposed")

    def new_session(self) -> Session:
        """Open a session the caller is responsible for closing."""
        return self.session_factory()

    def new_async_session(self) -> AsyncSession:
        """Open an async session the caller is responsible for closing."""
        return self.async_session_factory()

    def get_session(self) -> Iterator[Session]:
        with self.session_factory() as session:
            yield session

    async def get_async_session(self) -> AsyncIterator[AsyncSession]:
        async with self.async_session_factory() as session:
            yield session
