"""
Repository abstract base classes and generic SQLModel implementations.

BaseRepository runs on a blocking sqlmodel Session, AsyncBaseRepository on an
AsyncSession; both expose the same operations with the same effects. Every
mutating call commits before returning.
"""

from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Optional, Type, TypeVar, Union
from sqlalchemy import delete, func, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import QueryableAttribute
from sqlalchemy.sql import ColumnElement
from sqlmodel import Session, SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from datarepo.exceptions.errors import InvalidPageError, InvalidQueryError
from datarepo.logging.logger import get_logger

T = TypeVar("T", bound=SQLModel)
ID = TypeVar("ID")

# Sample.id, Sample.name.desc() or a plain column name
OrderBy = Union[str, QueryableAttribute, ColumnElement]

logger = get_logger("repository")


def page_offset(page_number: int, page_size: int) -> int:
    """Rows to skip before page `page_number` (1-based). Rejects values below 1."""
    if page_number < 1 or page_size < 1:
        raise InvalidPageError(page_number, page_size)
    return (page_number - 1) * page_size


class IRepository(ABC, Generic[T, ID]):
    """Repository interface; defines the standard blocking data access API."""

    @abstractmethod
    def get(self, id: ID) -> Optional[T]:
        """Get entity by primary key, None if absent."""
        pass

    @abstractmethod
    def get_page(self, page_number: int, page_size: int, order_by: OrderBy) -> List[T]:
        """Get one page of entities ordered by `order_by`."""
        pass

    @abstractmethod
    def get_all(self) -> List[T]:
        """Get every entity."""
        pass

    @abstractmethod
    def find(self, *criteria, **filters) -> Optional[T]:
        """Get the single entity matching the criteria."""
        pass

    @abstractmethod
    def find_all(self, *criteria, **filters) -> List[T]:
        """Get all entities matching the criteria."""
        pass

    @abstractmethod
    def add(self, entity: T) -> T:
        """Insert entity and commit."""
        pass

    @abstractmethod
    def add_all(self, entities: Iterable[T]) -> List[T]:
        """Insert entities in one commit."""
        pass

    @abstractmethod
    def update(self, updated: Optional[T], key: ID) -> Optional[T]:
        """Overwrite the entity stored at `key` and commit."""
        pass

    @abstractmethod
    def delete(self, entity: T) -> int:
        """Delete entity and commit; returns affected rows."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Count entities."""
        pass


class IAsyncRepository(ABC, Generic[T, ID]):
    """Awaitable counterpart of IRepository."""

    @abstractmethod
    async def get(self, id: ID) -> Optional[T]:
        pass

    @abstractmethod
    async def get_page(self, page_number: int, page_size: int, order_by: OrderBy) -> List[T]:
        pass

    @abstractmethod
    async def get_all(self) -> List[T]:
        pass

    @abstractmethod
    async def find(self, *criteria, **filters) -> Optional[T]:
        pass

    @abstractmethod
    async def find_all(self, *criteria, **filters) -> List[T]:
        pass

    @abstractmethod
    async def add(self, entity: T) -> T:
        pass

    @abstractmethod
    async def add_all(self, entities: Iterable[T]) -> List[T]:
        pass

    @abstractmethod
    async def update(self, updated: Optional[T], key: ID) -> Optional[T]:
        pass

    @abstractmethod
    async def delete(self, entity: T) -> int:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class StatementMixin:
    """Builds the statements shared by the blocking and async repositories."""

    model: Type[T]

    def _column(self, name: str):
        if name not in inspect(self.model).columns:
            raise InvalidQueryError(f"{self.model.__name__} has no column '{name}'")
        return getattr(self.model, name)

    def _select(self, criteria=(), filters=None):
        statement = select(self.model)
        if criteria:
            statement = statement.where(*criteria)
        for key, value in (filters or {}).items():
            statement = statement.where(self._column(key) == value)
        return statement

    def _page_statement(self, page_number: int, page_size: int, order_by: OrderBy):
        offset = page_offset(page_number, page_size)
        if isinstance(order_by, str):
            order_by = self._column(order_by)
        return select(self.model).order_by(order_by).offset(offset).limit(page_size)

    def _count_statement(self):
        return select(func.count()).select_from(self.model)

    def _delete_statement(self, entity: T):
        """DELETE by the entity's primary key; None when the entity has no key yet."""
        mapper = inspect(self.model)
        identity = mapper.primary_key_from_instance(entity)
        if any(value is None for value in identity):
            return None
        keys = [mapper.get_property_by_column(column).key for column in mapper.primary_key]
        return delete(self.model).where(
            *(getattr(self.model, key) == value for key, value in zip(keys, identity))
        )

    def _copy_columns(self, source: T, target: T) -> None:
        """Full replace of every non-key column of `target` with `source`'s values."""
        if source is target:
            return
        for attr in inspect(self.model).column_attrs:
            if any(column.primary_key for column in attr.columns):
                continue
            setattr(target, attr.key, getattr(source, attr.key))


class BaseRepository(StatementMixin, IRepository[T, ID]):
    """Generic repository over a blocking Session; subclasses can add custom queries."""

    def __init__(self, session: Session, model: Type[T]):
        """Initialize repository with session and model."""
        self.session = session
        self.model = model
        self.disposed = False

    def get(self, id: ID) -> Optional[T]:
        return self.session.get(self.model, id)

    def get_page(self, page_number: int, page_size: int, order_by: OrderBy) -> List[T]:
        statement = self._page_statement(page_number, page_size, order_by)
        return list(self.session.exec(statement).all())

    def get_all(self) -> List[T]:
        return list(self.session.exec(select(self.model)).all())

    def find(self, *criteria, **filters) -> Optional[T]:
        """Find the unique match; raises MultipleResultsFound when several rows match."""
        return self.session.exec(self._select(criteria, filters)).one_or_none()

    def find_all(self, *criteria, **filters) -> List[T]:
        return list(self.session.exec(self._select(criteria, filters)).all())

    def add(self, entity: T) -> T:
        self.session.add(entity)
        self._commit()
        self.session.refresh(entity)
        logger.debug(f"Added {self.model.__name__}")
        return entity

    def add_all(self, entities: Iterable[T]) -> List[T]:
        entities = list(entities)
        self.session.add_all(entities)
        self._commit()
        for entity in entities:
            self.session.refresh(entity)
        logger.debug(f"Added {len(entities)} {self.model.__name__} rows")
        return entities

    def update(self, updated: Optional[T], key: ID) -> Optional[T]:
        """Replace the stored entity's columns with `updated`'s; None if nothing is stored at `key`."""
        if updated is None:
            return None

        existing = self.session.get(self.model, key)
        if existing is None:
            return None

        self._copy_columns(updated, existing)
        self._commit()
        self.session.refresh(existing)
        logger.debug(f"Updated {self.model.__name__} {key}")
        return existing

    def delete(self, entity: T) -> int:
        statement = self._delete_statement(entity)
        if statement is None:
            return 0
        try:
            result = self.session.execute(statement)
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self._commit()
        logger.debug(f"Deleted {result.rowcount} {self.model.__name__} row(s)")
        return result.rowcount

    def count(self) -> int:
        return self.session.exec(self._count_statement()).one()

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Commit failed for {self.model.__name__}: {e}")
            self.session.rollback()
            raise

    def close(self) -> None:
        """Release the session; safe to call more than once."""
        if self.disposed:
            return
        self.session.close()
        self.disposed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncBaseRepository(StatementMixin, IAsyncRepository[T, ID]):
    """Generic repository over an AsyncSession; same operations as BaseRepository."""

    def __init__(self, session: AsyncSession, model: Type[T]):
        """Initialize repository with session and model."""
        self.session = session
        self.model = model
        self.disposed = False

    async def get(self, id: ID) -> Optional[T]:
        return await self.session.get(self.model, id)

    async def get_page(self, page_number: int, page_size: int, order_by: OrderBy) -> List[T]:
        statement = self._page_statement(page_number, page_size, order_by)
        result = await self.session.exec(statement)
        return list(result.all())

    async def get_all(self) -> List[T]:
        result = await self.session.exec(select(self.model))
        return list(result.all())

    async def find(self, *criteria, **filters) -> Optional[T]:
        """Find the unique match; raises MultipleResultsFound when several rows match."""
        result = await self.session.exec(self._select(criteria, filters))
        return result.one_or_none()

    async def find_all(self, *criteria, **filters) -> List[T]:
        result = await self.session.exec(self._select(criteria, filters))
        return list(result.all())

    async def add(self, entity: T) -> T:
        self.session.add(entity)
        await self._commit()
        await self.session.refresh(entity)
        logger.debug(f"Added {self.model.__name__}")
        return entity

    async def add_all(self, entities: Iterable[T]) -> List[T]:
        entities = list(entities)
        self.session.add_all(entities)
        await self._commit()
        for entity in entities:
            await self.session.refresh(entity)
        logger.debug(f"Added {len(entities)} {self.model.__name__} rows")
        return entities

    async def update(self, updated: Optional[T], key: ID) -> Optional[T]:
        if updated is None:
            return None

        existing = await self.session.get(self.model, key)
        if existing is None:
            return None

        self._copy_columns(updated, existing)
        await self._commit()
        await self.session.refresh(existing)
        logger.debug(f"Updated {self.model.__name__} {key}")
        return existing

    async def delete(self, entity: T) -> int:
        statement = self._delete_statement(entity)
        if statement is None:
            return 0
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        await self._commit()
        logger.debug(f"Deleted {result.rowcount} {self.model.__name__} row(s)")
        return result.rowcount

    async def count(self) -> int:
        result = await self.session.exec(self._count_statement())
        return result.one()

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Commit failed for {self.model.__name__}: {e}")
            await self.session.rollback()
            raise

    async def close(self) -> None:
        """Release the session; safe to call more than once."""
        if self.disposed:
            return
        await self.session.close()
        self.disposed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
