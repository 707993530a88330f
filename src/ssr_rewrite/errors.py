from pathlib import Path

from ssr_tree_sitter.errors import SsrError


class ScriptCompileError(SsrError):
    """The replacement script is not valid or uses forbidden constructs"""

    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        text = f"script error: {message}"
        if line is not None:
            text += f" (line {line})"
        super().__init__(text)


class ScriptRuntimeError(SsrError):
    """The replacement script failed while processing a match"""

    def __init__(self, path: Path | str, message: str):
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.path}: script failed: {message}")


class ScriptBudgetExceeded(ScriptRuntimeError):
    """A single script invocation ran past its step or time budget"""


class OverlappingEditsError(SsrError):
    """Two recorded changes overlap or start at the same offset"""

    def __init__(self, first, second):
        self.first = first
        self.second = second
        reason = "start at the same offset" if first.start_byte == second.start_byte else "overlap"
        super().__init__(
            f"edits {first.start_byte}..{first.end_byte} and "
            f"{second.start_byte}..{second.end_byte} {reason}"
        )


class InvalidEditError(SsrError):
    """A recorded change lies outside the content or splits a character"""

    def __init__(self, change, reason: str):
        self.change = change
        self.reason = reason
        super().__init__(f"edit {change.start_byte}..{change.end_byte} {reason}")
