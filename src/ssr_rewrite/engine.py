"""
Edit resolution and application.

Changes are spliced tail first: sorted by start offset, descending, so every
change still waiting to be applied keeps valid offsets into the original
content. The result is always re-parsed into a brand-new Document.
"""

from typing import Iterable, List

from ssr_tree_sitter.document import Document
from ssr_tree_sitter.query import Query

from .errors import InvalidEditError, OverlappingEditsError
from .models import Change, EditSet, is_char_boundary
from .sandbox import ExecutionBudget
from .script import EditScript


def check_changes(changes: Iterable[Change], source: bytes) -> List[Change]:
    """Validate bounds, character boundaries and overlap; return the changes sorted by start offset"""
    ordered = sorted(changes, key=lambda c: (c.start_byte, c.end_byte))
    for change in ordered:
        if not 0 <= change.start_byte <= change.end_byte <= len(source):
            raise InvalidEditError(change, f"is outside the content (size {len(source)})")
        if not (is_char_boundary(source, change.start_byte) and is_char_boundary(source, change.end_byte)):
            raise InvalidEditError(change, "splits a multi-byte character")
    for current, following in zip(ordered, ordered[1:]):
        if current.start_byte == following.start_byte or current.end_byte > following.start_byte:
            raise OverlappingEditsError(current, following)
    return ordered


def apply_changes(content: str, changes: Iterable[Change]) -> str:
    """Splice non-overlapping byte-range changes into `content`"""
    source = content.encode("utf8")
    ordered = check_changes(changes, source)
    if not ordered:
        return content

    result = bytearray(source)
    for change in reversed(ordered):
        result[change.start_byte : change.end_byte] = change.replacement.encode("utf8")
    return result.decode("utf8")


class RewriteEngine:
    """Runs a query plus replacement script over documents"""

    def __init__(self, budget: ExecutionBudget | None = None):
        self.budget = budget or ExecutionBudget()

    def edit(self, document: Document, query: Query | str, script: EditScript | str) -> Document:
        """Match, run the script once per match, apply the recorded edits.

        All matches are collected before the script runs, so it never sees a
        partially edited document. Any failure leaves `document` untouched.
        """
        if isinstance(query, str):
            query = Query.compile(document.language, query)
        if isinstance(script, str):
            script = EditScript(script, self.budget)

        matches = document.find(query)
        edit_set = script.run(document.path, document.source, matches)
        return self.apply(document, edit_set)

    def apply(self, document: Document, edit_set: EditSet) -> Document:
        content = apply_changes(document.content, edit_set.drain())
        return Document.from_content(document.path, document.language, content)


def edit(
    document: Document,
    query: Query | str,
    script: EditScript | str,
    budget: ExecutionBudget | None = None,
) -> Document:
    """Rewrite `document` with a replacement script; returns a new Document"""
    return RewriteEngine(budget).edit(document, query, script)
