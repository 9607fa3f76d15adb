"""Repository base class.

Thin wrapper over a DatabaseClient plus one ModelMapper per record type.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

from artmapper.core.engine import DatabaseClient
from artmapper.mapping.model import ModelMapper

T = TypeVar("T", bound=BaseModel)


class AsyncRepository:
    """Base class for repositories backed by an async DatabaseClient.

    Subclasses define concrete data access methods that delegate to
    ``self.engine``.
    """

    def __init__(self, engine: DatabaseClient) -> None:
        self.engine = engine
        self._mappers: dict[tuple[type, frozenset[str]], ModelMapper[Any]] = {}

    def mapper(self, target_class: type[T], exclude: frozenset[str] = frozenset()) -> ModelMapper[T]:
        """Return the (cached) mapper for *target_class*."""
        key = (target_class, exclude)
        if key not in self._mappers:
            self._mappers[key] = ModelMapper(target_class, exclude=exclude)
        return self._mappers[key]
