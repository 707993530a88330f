"""
Compiled structural queries (tree-sitter s-expression patterns).
"""

import re

from tree_sitter import Query as TSQuery
from tree_sitter import QueryError

from .errors import QueryCompileError
from .languages import Language

_POSITION = re.compile(r"row:?\s*(\d+),\s*column:?\s*(\d+)", re.IGNORECASE)


class Query:
    """A pattern compiled once for a language, independent of any document"""

    def __init__(self, language: Language, source: str, ts_query: TSQuery):
        self.language = language
        self.source = source
        self._query = ts_query
        self._capture_names = [ts_query.capture_name(i) for i in range(ts_query.capture_count)]

    @classmethod
    def compile(cls, language: Language, source: str) -> "Query":
        try:
            ts_query = TSQuery(language.grammar, source)
        except (QueryError, ValueError) as e:
            message = str(e).strip()
            raise QueryCompileError(message, _error_offset(source, message)) from e
        return cls(language, source, ts_query)

    @property
    def ts_query(self) -> TSQuery:
        return self._query

    @property
    def pattern_count(self) -> int:
        return self._query.pattern_count

    @property
    def capture_names(self) -> list[str]:
        return list(self._capture_names)

    def capture_name(self, slot: int) -> str:
        return self._capture_names[slot]

    def capture_index(self, name: str) -> int:
        return self._capture_names.index(name)


def _error_offset(source: str, message: str) -> int | None:
    """Translate tree-sitter's row/column into a character offset into `source`"""
    found = _POSITION.search(message)
    if not found:
        return None
    row, column = int(found.group(1)), int(found.group(2))
    lines = source.split("\n")
    if row >= len(lines):
        return len(source)
    offset = sum(len(line) + 1 for line in lines[:row])
    return offset + min(column, len(lines[row]))
