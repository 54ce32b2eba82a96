"""
Repository pattern: data access abstraction over a SQLModel session, blocking and async.
"""

from .base import (
    AsyncBaseRepository,
    BaseRepository,
    IAsyncRepository,
    IRepository,
    page_offset,
)

__all__ = [
    "AsyncBaseRepository",
    "BaseRepository",
    "IAsyncRepository",
    "IRepository",
    "page_offset",
]
