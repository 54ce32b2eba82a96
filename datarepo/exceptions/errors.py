from typing import Any


class RepositoryError(Exception):
    """Base class for errors raised by the repository layer itself (not the store)."""


class InvalidPageError(RepositoryError, ValueError):
    """Page number or page size below 1."""

    def __init__(self, page_number: int, page_size: int):
        self.page_number = page_number
        self.page_size = page_size
        super().__init__(
            f"page_number and page_size must be >= 1 (got page_number={page_number}, page_size={page_size})"
        )


class InvalidQueryError(RepositoryError, ValueError):
    """A filter or order-by names a column the model does not have."""


class BusinessException(Exception):
    """Base class for business exceptions."""
    def __init__(self, message: str, status_code: int = 200, code: int = 400, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.detail = detail
