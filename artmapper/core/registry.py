"""Named stored-function calls kept as .sql files.

A file's path below the root, with the suffix dropped and separators
turned into dots, is its query name::

    sql/user/get_by_email.sql            -> "user.get_by_email"
    sql/gallery/collection_artworks.sql  -> "gallery.collection_artworks"

The package ships its own ``sql`` directory; ``default_registry()`` loads it.
A deployment can point ``ARTMAPPER_SQL_DIR`` at another tree with the same
names.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import NamedTuple

from artmapper.core.exceptions import DuplicateQueryError, QueryNotFoundError

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parent.parent / "sql"


class SQLFile(NamedTuple):
    path: Path
    text: str


def query_name_for(root_dir: Path, sql_file: Path) -> str:
    """Dotted query name of *sql_file* relative to *root_dir*."""
    return ".".join(sql_file.relative_to(root_dir).with_suffix("").parts)


class SQLRegistry:
    """Read-only map of query names to SQL text, loaded once from *root_dir*.

    Blank files are skipped with a warning so a half-written query shows up
    as missing rather than as an empty statement sent to the server.

    Raises:
        DuplicateQueryError: If two files resolve to the same query name.
    """

    def __init__(self, root_dir: Path | str) -> None:
        self._root_dir = Path(root_dir)
        self._files: dict[str, SQLFile] = {}
        if self._root_dir.is_dir():
            self._load()
        else:
            logger.warning("SQL directory %s does not exist", self._root_dir)

    def _load(self) -> None:
        for sql_file in sorted(self._root_dir.rglob("*.sql")):
            name = query_name_for(self._root_dir, sql_file)
            if name in self._files:
                raise DuplicateQueryError(name, str(self._files[name].path), str(sql_file))

            text = sql_file.read_text(encoding="utf-8").strip()
            if not text:
                logger.warning("Skipping empty SQL file %s", sql_file)
                continue
            self._files[name] = SQLFile(sql_file, text)

        logger.debug("Loaded %d queries from %s", len(self._files), self._root_dir)

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def get(self, query_name: str) -> str:
        """SQL text of *query_name*.

        Raises:
            QueryNotFoundError: If no file maps to that name.
        """
        return self._entry(query_name).text

    def path_of(self, query_name: str) -> Path:
        """File *query_name* was loaded from."""
        return self._entry(query_name).path

    def _entry(self, query_name: str) -> SQLFile:
        try:
            return self._files[query_name]
        except KeyError:
            raise QueryNotFoundError(query_name) from None

    def missing(self, query_names: Iterable[str]) -> list[str]:
        """Those of *query_names* this registry cannot serve, in the given order."""
        return [name for name in query_names if name not in self._files]

    @property
    def query_names(self) -> list[str]:
        return sorted(self._files)

    def __contains__(self, query_name: object) -> bool:
        return query_name in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self.query_names)

    def __len__(self) -> int:
        return len(self._files)


def default_registry() -> SQLRegistry:
    """Registry over the stored-function calls bundled with artmapper."""
    return SQLRegistry(SQL_DIR)
