"""The Result envelope returned by every data mapper operation."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from artmapper.core.exceptions import APIError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """``(error, data)`` pair; never both set.

    Both may be unset only for a listing operation that legitimately found
    nothing, in which case ``data`` is an empty list rather than None.

    Unpacks like a tuple::

        error, user = await mapper.get_user(42)
    """

    error: APIError | None = None
    data: T | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.data is not None:
            raise ValueError("Result cannot carry both an error and data")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> Result[T]:
        return cls(data=data)

    @classmethod
    def failure(cls, error: APIError) -> Result[Any]:
        return cls(error=error)

    def __iter__(self) -> Iterator[Any]:
        return iter((self.error, self.data))
