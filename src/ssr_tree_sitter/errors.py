"""
Error taxonomy for documents, languages and queries.

Every failure is a typed exception; nothing in the library logs or prints.
"""

from pathlib import Path


class SsrError(Exception):
    """Base class for all SSR errors"""


class IoError(SsrError):
    """A source file could not be read"""

    def __init__(self, path: Path | str, reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"{self.path}: cannot read file"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class LanguageError(SsrError):
    """Unknown language name or unusable grammar"""


class ParseError(SsrError):
    """The grammar produced no syntax tree"""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"{self.path}: failed to parse")


class QueryCompileError(SsrError):
    """A structural pattern could not be compiled for the language"""

    def __init__(self, message: str, offset: int | None = None):
        self.message = message
        self.offset = offset
        text = f"query error: {message}"
        if offset is not None:
            text += f" (at offset {offset})"
        super().__init__(text)
