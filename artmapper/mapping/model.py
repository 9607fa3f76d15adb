"""Row-to-record mapper for the Pydantic record types in ``artmapper.models``.

Stored functions return either a row dict or a single json value. Drivers
without a json type hand that value back as text, so text is decoded
before validation.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from artmapper.core.exceptions import ColumnMismatchError

T = TypeVar("T", bound=BaseModel)


class ModelMapper(Generic[T]):
    """Validates rows into *target_class*.

    Args:
        target_class: Pydantic model to build from row data.
        exclude: Columns dropped before validation, e.g. a password hash
            that must never leave the data layer.
    """

    def __init__(self, target_class: type[T], exclude: Iterable[str] = ()) -> None:
        self._target_class = target_class
        self._exclude = frozenset(exclude)

    def map_one(self, row: dict[str, Any] | str | bytes) -> T:
        """Map a single row (or json text) to a target_class instance."""
        name = self._target_class.__name__
        if isinstance(row, (str, bytes, bytearray)):
            try:
                row = json.loads(row)
            except ValueError as e:
                raise ColumnMismatchError(name, [str(e)]) from e
        if not isinstance(row, dict):
            raise ColumnMismatchError(name, [f"expected a mapping, got {type(row).__name__}"])

        values = {key: value for key, value in row.items() if key not in self._exclude}
        try:
            return self._target_class.model_validate(values)
        except ValidationError as e:
            missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ColumnMismatchError(name, missing) from e

    def map_many(self, rows: list[Any]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]
