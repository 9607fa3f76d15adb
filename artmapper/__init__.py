"""artmapper - stored-function data mapper for the art gallery API."""

from __future__ import annotations

import logging

from artmapper.core.connection import AsyncConnectionManager, ConnectionConfig
from artmapper.core.engine import AsyncEngine, DatabaseClient
from artmapper.core.enums import StatusCode
from artmapper.core.exceptions import (
    AdapterError,
    APIError,
    ArtmapperError,
    ColumnMismatchError,
    ConnectionError,  # noqa: A004
    DuplicateQueryError,
    ExecutionError,
    MappingError,
    PoolError,
    QueryExecutionError,
    QueryNotFoundError,
    RegistryError,
)
from artmapper.core.registry import SQLRegistry, default_registry
from artmapper.core.settings import Settings, get_settings
from artmapper.mapping.model import ModelMapper
from artmapper.models import (
    Artwork,
    Collection,
    Favorite,
    LoginInfo,
    PublicProfile,
    SignupInfo,
    User,
    UserUpdate,
)
from artmapper.repository import DataMapper, Result, create_datamapper

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Data mapper
    "DataMapper",
    "Result",
    "create_datamapper",
    # Records
    "LoginInfo",
    "SignupInfo",
    "UserUpdate",
    "User",
    "PublicProfile",
    "Artwork",
    "Collection",
    "Favorite",
    # Connection
    "ConnectionConfig",
    "AsyncConnectionManager",
    "Settings",
    "get_settings",
    # Engine
    "AsyncEngine",
    "DatabaseClient",
    # Registry
    "SQLRegistry",
    "default_registry",
    # Mapping
    "ModelMapper",
    # Enums
    "StatusCode",
    # Exceptions
    "ArtmapperError",
    "APIError",
    "RegistryError",
    "QueryNotFoundError",
    "DuplicateQueryError",
    "ExecutionError",
    "QueryExecutionError",
    "MappingError",
    "ColumnMismatchError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
