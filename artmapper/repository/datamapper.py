"""Data mapper for users, collections, artworks and favorites.

Each operation is one call to a stored function (``get_collections`` adds
one dependent call per collection). Nothing is raised to the caller: every
outcome comes back as a :class:`Result`.

Failure mapping:

* the stored function returned nothing usable -> 403, or 404 for lookups
  of a user by id;
* duplicate nickname on sign-up -> 403;
* anything else -> 500 with the driver's message and the exception as cause.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from artmapper.core.engine import AsyncEngine
from artmapper.core.enums import StatusCode
from artmapper.core.exceptions import APIError, QueryExecutionError
from artmapper.core.registry import SQLRegistry
from artmapper.core.settings import Settings, get_settings
from artmapper.models.gallery import Artwork, Collection, Favorite
from artmapper.models.user import (
    LoginInfo,
    PublicProfile,
    SignupInfo,
    User,
    UserUpdate,
    as_argument,
)
from artmapper.repository.base import AsyncRepository
from artmapper.repository.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

INVALID_INFORMATION = "invalid information"
NICKNAME_ALREADY_USED = "nickname already used"
USER_NOT_FOUND = "user not found"

UNIQUE_VIOLATION = "23505"
NICKNAME_CONSTRAINT = "person_nickname_key"
# Only used when the driver gives no SQLSTATE; breaks if the server's
# message wording or locale changes.
DUPLICATE_NICKNAME_MESSAGE = 'duplicate key value violates unique constraint "person_nickname_key"'

HIDDEN_USER_COLUMNS = frozenset({"hash"})


def driver_message(exc: BaseException) -> str:
    """The database's own message for *exc*, without engine decoration."""
    if isinstance(exc, QueryExecutionError):
        return exc.detail
    return str(exc)


def is_duplicate_nickname(exc: BaseException) -> bool:
    if (
        getattr(exc, "sqlstate", None) == UNIQUE_VIOLATION
        and getattr(exc, "constraint_name", None) == NICKNAME_CONSTRAINT
    ):
        return True
    return driver_message(exc) == DUPLICATE_NICKNAME_MESSAGE


def _first_value(rows: list[dict[str, Any]], column: str) -> Any:
    if not rows:
        return None
    return rows[0].get(column)


def _first_row(rows: list[dict[str, Any]]) -> dict[str, Any] | None:
    if not rows or all(value is None for value in rows[0].values()):
        return None
    return rows[0]


def _column_values(rows: list[dict[str, Any]], column: str) -> list[Any] | None:
    """Non-null values of *column*; None when every returned value is NULL."""
    values = [row.get(column) for row in rows]
    present = [value for value in values if value is not None]
    if values and not present:
        return None
    return present


def _non_null_rows(rows: list[dict[str, Any]]) -> list[dict[str, Any]] | None:
    """*rows* minus all-NULL rows; None when nothing but NULL rows came back."""
    present = [row for row in rows if any(value is not None for value in row.values())]
    if rows and not present:
        return None
    return present


class DataMapper(AsyncRepository):
    """Forwards application requests to the stored functions.

    Args:
        engine: Any :class:`DatabaseClient`, normally an :class:`AsyncEngine`.
    """

    query_names = (
        "user.get_by_email",
        "user.sign_in",
        "user.insert",
        "user.list_by_role",
        "user.get_by_id",
        "user.get_profil",
        "user.update",
        "user.delete",
        "gallery.user_collections",
        "gallery.collection_artworks",
        "gallery.user_artworks",
        "gallery.user_favorites",
        "gallery.delete_user_favorites",
    )

    async def _guard(
        self,
        operation: str,
        fetch: Callable[[], Awaitable[T | None]],
        *,
        absent: tuple[str, int] = (INVALID_INFORMATION, StatusCode.FORBIDDEN),
        classify: Callable[[Exception], APIError | None] | None = None,
    ) -> Result[T]:
        """Run *fetch* and turn its outcome into a Result.

        *fetch* returns None when the stored function produced nothing
        usable, which becomes the *absent* error.
        """
        try:
            data = await fetch()
        except Exception as exc:
            error = classify(exc) if classify is not None else None
            if error is None:
                message = driver_message(exc)
                logger.error("%s failed: %s", operation, message, exc_info=exc)
                error = APIError(message, StatusCode.INTERNAL_SERVER_ERROR, exc)
            return Result.failure(error)

        logger.debug("%s -> %r", operation, data)
        if data is None:
            message, status = absent
            return Result.failure(APIError(message, status))
        return Result.success(data)

    async def _single(
        self,
        query_name: str,
        params: dict[str, Any],
        column: str,
        target_class: type[T],
    ) -> T | None:
        rows = await self.engine.execute(query_name, params)
        value = _first_value(rows, column)
        # sign_in answers false for bad credentials; {} is a malformed record
        if value is None or value is False:
            return None
        return self.mapper(target_class).map_one(value)

    # --- users ---

    async def get_user_by_email(self, login_info: LoginInfo | dict[str, Any]) -> Result[User]:
        """User record matching the credentials' email, hash included."""
        return await self._guard(
            "get_user_by_email",
            lambda: self._single(
                "user.get_by_email", {"info": as_argument(login_info)}, "get_user_by_email", User
            ),
        )

    async def sign_in(self, login_info: LoginInfo | dict[str, Any]) -> Result[User]:
        return await self._guard(
            "sign_in",
            lambda: self._single("user.sign_in", {"info": as_argument(login_info)}, "sign_in", User),
        )

    async def sign_up(self, signup_info: SignupInfo | dict[str, Any]) -> Result[User]:
        """Create a user. A taken nickname yields 403 instead of the raw database error."""

        def classify(exc: Exception) -> APIError | None:
            if is_duplicate_nickname(exc):
                logger.info("sign_up rejected: nickname already used")
                return APIError(NICKNAME_ALREADY_USED, StatusCode.FORBIDDEN)
            return None

        return await self._guard(
            "sign_up",
            lambda: self._single(
                "user.insert", {"info": as_argument(signup_info)}, "insert_user", User
            ),
            classify=classify,
        )

    async def get_users(self, role: str) -> Result[list[User]]:
        """Users holding *role*; an empty list is a valid answer."""

        async def fetch() -> list[User]:
            rows = await self.engine.execute("user.list_by_role", {"role": role})
            values = _column_values(rows, "get_users") or []
            return self.mapper(User).map_many(values)

        return await self._guard("get_users", fetch)

    async def get_user(self, user_id: int) -> Result[User]:
        return await self._guard(
            "get_user",
            lambda: self._single("user.get_by_id", {"id": user_id}, "get_user_by_id", User),
            absent=(USER_NOT_FOUND, StatusCode.NOT_FOUND),
        )

    async def get_profil_public(self, user_id: int) -> Result[PublicProfile]:
        """Public profile of a user, as other users see it."""
        return await self._guard(
            "get_profil_public",
            lambda: self._single(
                "user.get_profil", {"id": user_id}, "get_user_profil", PublicProfile
            ),
            absent=(USER_NOT_FOUND, StatusCode.NOT_FOUND),
        )

    async def update(self, new_infos: UserUpdate | dict[str, Any]) -> Result[User]:
        """Apply *new_infos* and return the updated user, password hash removed."""

        async def fetch() -> User | None:
            rows = await self.engine.execute("user.update", {"infos": as_argument(new_infos)})
            row = _first_row(rows)
            if row is None:
                return None
            return self.mapper(User, exclude=HIDDEN_USER_COLUMNS).map_one(row)

        return await self._guard("update", fetch)

    async def delete(self, user_id: int) -> Result[Any]:
        async def fetch() -> Any:
            rows = await self.engine.execute("user.delete", {"id": user_id})
            return _first_value(rows, "delete_person") or None

        return await self._guard("delete", fetch)

    # --- gallery ---

    async def get_collections(self, user_id: int) -> Result[list[Collection]]:
        """Collections of a user, each with its artworks attached.

        Artworks are fetched one collection at a time, in the order the
        collections came back. If any of those calls fails the whole
        operation fails and no collection is returned.
        """

        async def fetch() -> list[Collection] | None:
            rows = await self.engine.execute("gallery.user_collections", {"id": user_id})
            values = _column_values(rows, "get_user_collections")
            if values is None:
                return None
            collections = self.mapper(Collection).map_many(values)
            for collection in collections:
                artwork_rows = await self.engine.execute(
                    "gallery.collection_artworks", {"id": collection.id}
                )
                collection.artworks = self.mapper(Artwork).map_many(artwork_rows)
            return collections

        return await self._guard("get_collections", fetch)

    async def get_artworks(self, user_id: int) -> Result[list[Artwork]]:
        async def fetch() -> list[Artwork] | None:
            rows = await self.engine.execute("gallery.user_artworks", {"id": user_id})
            present = _non_null_rows(rows)
            if present is None:
                return None
            return self.mapper(Artwork).map_many(present)

        return await self._guard("get_artworks", fetch)

    async def get_favorites(self, user_id: int) -> Result[list[Favorite]]:
        async def fetch() -> list[Favorite] | None:
            rows = await self.engine.execute("gallery.user_favorites", {"id": user_id})
            values = _column_values(rows, "get_user_favorites")
            if values is None:
                return None
            return self.mapper(Favorite).map_many(values)

        return await self._guard("get_favorites", fetch)

    async def delete_favorites(self, user_id: int) -> Result[Any]:
        """Remove every favorite of a user."""

        async def fetch() -> Any:
            rows = await self.engine.execute("gallery.delete_user_favorites", {"id": user_id})
            return _first_value(rows, "delete_user_favorites") or None

        return await self._guard("delete_favorites", fetch)


def create_datamapper(
    settings: Settings | None = None,
    registry: SQLRegistry | None = None,
) -> DataMapper:
    """Build a DataMapper on an AsyncEngine configured from *settings*.

    The pool is opened lazily on first use; close it with
    ``await mapper.engine.close()``. Queries the registry lacks are logged
    here and fail with a 500 when their operation is called.
    """
    settings = settings if settings is not None else get_settings()
    logging.getLogger("artmapper").setLevel(settings.log_level)
    if registry is None and settings.sql_dir is not None:
        registry = SQLRegistry(settings.sql_dir)
    engine = AsyncEngine.from_config(settings.connection_config(), registry)
    missing = engine.registry.missing(DataMapper.query_names)
    if missing:
        logger.warning(
            "SQL directory %s lacks %d queries: %s",
            engine.registry.root_dir,
            len(missing),
            ", ".join(missing),
        )
    return DataMapper(engine)
