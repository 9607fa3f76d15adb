"""artmapper exception hierarchy.

All exceptions are artmapper-specific. Raw driver exceptions are wrapped
before they leave the engine; APIError is what the data mapper hands to
the HTTP layer inside a Result envelope.
"""

from __future__ import annotations


class ArtmapperError(Exception):
    """Base exception for all artmapper errors."""


# --- API ---


class APIError(ArtmapperError):
    """Application error carrying an HTTP status code for the caller.

    Args:
        message: Human-readable message, safe to show to the client.
        status_code: HTTP status the upstream layer should respond with.
        cause: Underlying exception, kept for diagnostics.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"APIError({self.message!r}, {self.status_code})"


# --- Registry ---


class RegistryError(ArtmapperError):
    """Base for SQL registry errors."""


class QueryNotFoundError(RegistryError):
    """Raised when a named query cannot be found in the registry."""

    def __init__(self, query_name: str) -> None:
        self.query_name = query_name
        super().__init__(f"Query not found: '{query_name}'")


class DuplicateQueryError(RegistryError):
    """Raised when two SQL files resolve to the same namespace key."""

    def __init__(self, query_name: str, path_a: str, path_b: str) -> None:
        self.query_name = query_name
        super().__init__(f"Duplicate query name '{query_name}': {path_a} and {path_b}")


# --- Execution ---


class ExecutionError(ArtmapperError):
    """Base for query execution errors."""


class QueryExecutionError(ExecutionError):
    """Raised when the driver fails while executing a named query.

    ``detail`` is the driver's own message. ``sqlstate`` and
    ``constraint_name`` are filled in when the driver exposes them.
    """

    def __init__(
        self,
        query_name: str,
        detail: str,
        sqlstate: str | None = None,
        constraint_name: str | None = None,
    ) -> None:
        self.query_name = query_name
        self.detail = detail
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name
        super().__init__(f"Query '{query_name}' failed: {detail}")


# --- Mapping ---


class MappingError(ArtmapperError):
    """Base for mapping errors."""


class ColumnMismatchError(MappingError):
    """Raised when required fields cannot be mapped from row columns."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")


# --- Adapter ---


class AdapterError(ArtmapperError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
