"""Named SQL queries loaded from ``.sql`` files.

A file's path below the root, with separators turned into dots, is its key:

    sql/garden/get.sql           -> "garden.get"
    sql/users_gardens/insert.sql -> "users_gardens.insert"
"""

from __future__ import annotations

from pathlib import Path

from garden_store.core.exceptions import DuplicateQueryError, QueryNotFoundError

DEFAULT_SQL_DIR = Path(__file__).resolve().parent.parent / "sql"


def _query_name(sql_file: Path, root: Path) -> str:
    return ".".join(sql_file.relative_to(root).with_suffix("").parts)


class SQLRegistry:
    """Read-only map of query name to SQL text.

    Every ``*.sql`` file under ``root_dir`` is read once, on construction.
    A missing directory yields an empty registry.

    Args:
        root_dir: Directory to scan. Defaults to the queries bundled with
            garden_store.

    Raises:
        DuplicateQueryError: If two files resolve to the same name.
    """

    def __init__(self, root_dir: Path | str = DEFAULT_SQL_DIR) -> None:
        self._root_dir = Path(root_dir)
        self._queries: dict[str, str] = {}

        sources: dict[str, Path] = {}
        files = sorted(self._root_dir.rglob("*.sql")) if self._root_dir.is_dir() else []
        for sql_file in files:
            name = _query_name(sql_file, self._root_dir)
            if name in sources:
                raise DuplicateQueryError(name, str(sources[name]), str(sql_file))
            sources[name] = sql_file
            self._queries[name] = sql_file.read_text(encoding="utf-8").strip()

    def get(self, query_name: str) -> str:
        """Return the SQL text registered as ``query_name``.

        Raises:
            QueryNotFoundError: If nothing is registered under that name.
        """
        if query_name not in self._queries:
            raise QueryNotFoundError(query_name)
        return self._queries[query_name]

    def has(self, query_name: str) -> bool:
        return query_name in self._queries

    @property
    def query_names(self) -> list[str]:
        """Registered names, sorted."""
        return sorted(self._queries)

    def __len__(self) -> int:
        return len(self._queries)
