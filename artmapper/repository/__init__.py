"""Repository layer - the data mapper and its Result envelope."""

from __future__ import annotations

from artmapper.repository.base import AsyncRepository
from artmapper.repository.datamapper import DataMapper, create_datamapper
from artmapper.repository.result import Result

__all__ = [
    "AsyncRepository",
    "DataMapper",
    "Result",
    "create_datamapper",
]
