"""
Service layer: session-owning CRUD facades that delegate to repositories.
"""

from .base import AsyncBaseService, BaseService

__all__ = ["AsyncBaseService", "BaseService"]
