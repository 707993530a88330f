"""
Parsed documents: source text plus its tree-sitter syntax tree.

A Document is immutable once built; edits always produce a new Document.
"""

import io
from pathlib import Path
from typing import Iterator

from tree_sitter import QueryCursor, Tree

from .ast_walker import ASTWalker
from .errors import IoError, ParseError
from .languages import Language
from .models import Capture, Match, Range, SyntaxNode
from .query import Query


class Document:
    """Source text and syntax tree for one file"""

    __slots__ = ("_path", "_language", "_content", "_source", "_tree")

    def __init__(self, path: Path, language: Language, content: str, tree: Tree):
        self._path = path
        self._language = language
        self._content = content
        self._source = content.encode("utf8")
        self._tree = tree

    @classmethod
    def open(cls, path: Path | str, language: Language) -> "Document":
        path = Path(path)
        try:
            content = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise IoError(path, str(e)) from e
        return cls.from_content(path, language, content)

    @classmethod
    def from_content(cls, path: Path | str, language: Language, content: str) -> "Document":
        path = Path(path)
        tree = language.parser().parse(content.encode("utf8"))
        if tree is None:
            raise ParseError(path)
        return cls(path, language, content, tree)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def language(self) -> Language:
        return self._language

    @property
    def content(self) -> str:
        return self._content

    @property
    def source(self) -> bytes:
        """UTF-8 encoded content; all tree offsets index into this"""
        return self._source

    @property
    def tree(self) -> Tree:
        return self._tree

    @property
    def has_syntax_errors(self) -> bool:
        return self._tree.root_node.has_error

    def lines(self) -> Iterator[str]:
        return iter(self._content.splitlines())

    def line_count(self) -> int:
        return len(self._content.splitlines())

    def find(self, query: Query) -> list[Match]:
        """Run a compiled query over the whole tree.

        Matches come back in tree-sitter's order (pre-order, alternatives in
        declaration order) with ids numbered from zero. Capture text is taken
        from this document's content and never changes afterwards.
        """
        cursor = QueryCursor(query.ts_query)
        matches = []
        for match_id, (pattern_index, captures_dict) in enumerate(cursor.matches(self._tree.root_node)):
            captures = []
            for name, nodes in captures_dict.items():
                slot = query.capture_index(name)
                for node in nodes:
                    captures.append(
                        Capture(
                            index=slot,
                            name=name,
                            range=Range.from_node(node),
                            text=ASTWalker.get_text(node, self._source),
                        )
                    )
            captures.sort(key=lambda c: (c.range.start_byte, c.index))
            matches.append(Match(id=match_id, pattern_index=pattern_index, captures=tuple(captures)))
        return matches

    def nodes(self) -> list[SyntaxNode]:
        """Named nodes in pre-order, as described by the tree printer"""
        return list(ASTWalker.walk_named(self._tree))

    def write_tree(self, out) -> None:
        ASTWalker.write_tree(self._tree, out)

    def format_tree(self) -> str:
        buffer = io.StringIO()
        self.write_tree(buffer)
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"Document(path={str(self._path)!r}, language={self._language.value!r})"
