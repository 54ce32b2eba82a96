"""
Service layer: the repository operations behind a unit-of-work-scoped handle.

A service owns its session. When none is passed in, one is opened from the
configured database, and it is closed exactly once when the service is closed
(or leaves its `with` / `async with` block).
"""

from typing import Iterable, List, Optional, Type
from sqlmodel import Session
from sqlmodel.ext.asyncio.session import AsyncSession
from datarepo.database.manager import DatabaseManager
from datarepo.logging.logger import get_logger
from datarepo.repository.base import (
    ID,
    T,
    AsyncBaseRepository,
    BaseRepository,
    IAsyncRepository,
    IRepository,
    OrderBy,
)

logger = get_logger("service")


class BaseService(IRepository[T, ID]):
    """Blocking CRUD service for one entity type."""

    def __init__(self, model: Type[T], session: Optional[Session] = None):
        self.model = model
        if session is None:
            session = DatabaseManager.get_instance().sql.new_session()
        self.session = session
        self.repository = self._build_repository(session)
        self.disposed = False

    def _build_repository(self, session: Session) -> BaseRepository[T, ID]:
        """Override to plug in an entity-specific repository."""
        return BaseRepository(session, self.model)

    def get(self, id: ID) -> Optional[T]:
        return self.repository.get(id)

    def get_page(self, page_number: int, page_size: int, order_by: OrderBy) -> List[T]:
        return self.repository.get_page(page_number, page_size, order_by)

    def get_all(self) -> List[T]:
        return self.repository.get_all()

    def find(self, *criteria, **filters) -> Optional[T]:
        return self.repository.find(*criteria, **filters)

    def find_all(self, *criteria, **filters) -> List[T]:
        return self.repository.find_all(*criteria, **filters)

    def add(self, entity: T) -> T:
        entity = self.repository.add(entity)
        logger.info(f"{self.model.__name__} created")
        return entity

    def add_all(self, entities: Iterable[T]) -> List[T]:
        entities = self.repository.add_all(entities)
        logger.info(f"{len(entities)} {self.model.__name__} records created")
        return entities

    def update(self, updated: Optional[T], key: ID) -> Optional[T]:
        existing = self.repository.update(updated, key)
        if existing is None:
            logger.info(f"{self.model.__name__} {key} not updated (missing input or record)")
        else:
            logger.info(f"{self.model.__name__} {key} updated")
        return existing

    def delete(self, entity: T) -> int:
        affected = self.repository.delete(entity)
        logger.info(f"{self.model.__name__} delete affected {affected} row(s)")
        return affected

    def count(self) -> int:
        return self.repository.count()

    def close(self) -> None:
        if self.disposed:
            return
        self.repository.close()
        self.disposed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncBaseService(IAsyncRepository[T, ID]):
    """Async CRUD service for one entity type; mirrors BaseService."""

    def __init__(self, model: Type[T], session: Optional[AsyncSession] = None):
        self.model = model
        if session is None:
            session = DatabaseManager.get_instance().sql.new_async_session()
        self.session = session
        self.repository = self._build_repository(session)
        self.disposed = False

    def _build_repository(self, session: AsyncSession) -> AsyncBaseRepository[T, ID]:
        """Override to plug in an entity-specific repository."""
        return AsyncBaseRepository(session, self.model)

    async def get(self, id: ID) -> Optional[T]:
        return await self.repository.get(id)

    async def get_page(self, page_number: int, page_size: int, order_by: OrderBy) -> List[T]:
        return await self.repository.get_page(page_number, page_size, order_by)

    async def get_all(self) -> List[T]:
        return await self.repository.get_all()

    async def find(self, *criteria, **filters) -> Optional[T]:
        return await self.repository.find(*criteria, **filters)

    async def find_all(self, *criteria, **filters) -> List[T]:
        return await self.repository.find_all(*criteria, **filters)

    async def add(self, entity: T) -> T:
        entity = await self.repository.add(entity)
        logger.info(f"{self.model.__name__} created")
        return entity

    async def add_all(self, entities: Iterable[T]) -> List[T]:
        entities = await self.repository.add_all(entities)
        logger.info(f"{len(entities)} {self.model.__name__} records created")
        return entities

    async def update(self, updated: Optional[T], key: ID) -> Optional[T]:
        existing = await self.repository.update(updated, key)
        if existing is None:
            logger.info(f"{self.model.__name__} {key} not updated (missing input or record)")
        else:
            logger.info(f"{self.model.__name__} {key} updated")
        return existing

    async def delete(self, entity: T) -> int:
        affected = await self.repository.delete(entity)
        logger.info(f"{self.model.__name__} delete affected {affected} row(s)")
        return affected

    async def count(self) -> int:
        return await self.repository.count()

    async def close(self) -> None:
        if self.disposed:
            return
        await self.repository.close()
        self.disposed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
