"""
Unified diffs between two documents.
"""

import difflib

from ssr_tree_sitter.document import Document

CONTEXT_LINES = 5
NO_NEWLINE = "\\ No newline at end of file\n"


class DocumentDiff:
    """Line based unified diff of two documents' content"""

    def __init__(self, old: Document, new: Document, context: int = CONTEXT_LINES):
        self.old = old
        self.new = new
        self.context = context
        self._lines: list[str] | None = None

    @property
    def lines(self) -> list[str]:
        if self._lines is None:
            self._lines = self._compute()
        return self._lines

    def _compute(self) -> list[str]:
        if self.old.content == self.new.content:
            return []
        diff = difflib.unified_diff(
            self.old.content.splitlines(keepends=True),
            self.new.content.splitlines(keepends=True),
            fromfile=f"a/{self.old.path.as_posix()}",
            tofile=f"b/{self.new.path.as_posix()}",
            n=self.context,
        )
        lines = []
        for line in diff:
            if line.endswith("\n"):
                lines.append(line)
            else:
                lines.append(line + "\n")
                lines.append(NO_NEWLINE)
        return lines

    def is_empty(self) -> bool:
        return not self.lines

    def stats(self) -> tuple[int, int]:
        """Number of (added, removed) lines"""
        added = removed = 0
        for line in self.lines:
            if line.startswith("+") and not line.startswith("+++"):
                added += 1
            elif line.startswith("-") and not line.startswith("---"):
                removed += 1
        return added, removed

    def __str__(self) -> str:
        return "".join(self.lines)

    def __bool__(self) -> bool:
        return not self.is_empty()
