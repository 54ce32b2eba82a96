"""
Schema initializer for early development: create tables from SQLModel metadata,
optionally dropping them first, then run a seed hook.

Models must be imported (registered in SQLModel.metadata) before calling it;
see apps/models.py. Use Alembic migrations for anything long-lived.
"""

from typing import Callable, Optional
from sqlmodel import Session, SQLModel
from datarepo.logging.logger import get_logger
from .sql_driver import SQLDriver

logger = get_logger("db_initializer")

SeedHook = Callable[[Session], None]


class DatabaseInitializer:
    """Creates (or drops and recreates) every table known to SQLModel.metadata."""

    def __init__(self, driver: SQLDriver, seed: Optional[SeedHook] = None):
        self.driver = driver
        self.seed_hook = seed

    def create_all(self) -> None:
        """Create missing tables, then seed."""
        SQLModel.metadata.create_all(self.driver.engine)
        logger.info(f"Schema ensured: {', '.join(sorted(SQLModel.metadata.tables))}")
        self.seed()

    def drop_create(self) -> None:
        """Drop every table and recreate the schema, then seed."""
        SQLModel.metadata.drop_all(self.driver.engine)
        logger.warning("All tables dropped")
        self.create_all()

    def seed(self) -> None:
        if self.seed_hook is None:
            return
        with self.driver.new_session() as session:
            self.seed_hook(session)
            session.commit()
        logger.info("Seed data committed")

    async def create_all_async(self) -> None:
        """Create missing tables through the async engine (no seeding)."""
        async with self.driver.async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def drop_all_async(self) -> None:
        async with self.driver.async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
