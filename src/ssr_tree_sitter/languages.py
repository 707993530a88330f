"""
Supported languages and their tree-sitter grammars.

Grammar packages are imported lazily so a missing optional grammar only
fails when that language is actually used.
"""

from enum import Enum
from functools import lru_cache

from tree_sitter import Language as TSLanguage
from tree_sitter import Parser

from .errors import LanguageError


class Language(str, Enum):
    BAZEL = "bazel"
    C = "c"
    PYTHON = "python"
    RUST = "rust"

    @classmethod
    def from_name(cls, name: str) -> "Language":
        """Resolve a user supplied language name (case-insensitive)"""
        key = name.strip().lower()
        for lang in cls:
            if lang.value == key:
                return lang
        choices = ", ".join(lang.value for lang in cls)
        raise LanguageError(f"invalid language '{name}' (expected one of: {choices})")

    @property
    def grammar(self) -> TSLanguage:
        return _load_grammar(self)

    @property
    def file_globs(self) -> list[str]:
        """Default file name globs, as in ripgrep's type table"""
        return list(DEFAULT_TYPES[self.value])

    def parser(self) -> Parser:
        """Fresh parser for this language; parsers are not shared between threads"""
        return Parser(self.grammar)

    def __str__(self) -> str:
        return self.value


DEFAULT_TYPES: dict[str, tuple[str, ...]] = {
    "bazel": ("*.bazel", "*.bzl", "*.BUILD", "BUILD", "WORKSPACE", "*.star"),
    "c": ("*.c", "*.h", "*.H"),
    "python": ("*.py", "*.pyi"),
    "rust": ("*.rs",),
}


@lru_cache(maxsize=None)
def _load_grammar(lang: Language) -> TSLanguage:
    try:
        if lang in (Language.BAZEL, Language.PYTHON):
            import tree_sitter_python as grammar
        elif lang is Language.C:
            import tree_sitter_c as grammar
        else:
            import tree_sitter_rust as grammar
    except ImportError as e:
        raise LanguageError(f"grammar for '{lang.value}' is not installed: {e}") from e

    try:
        return TSLanguage(grammar.language())
    except ValueError as e:
        # ABI version mismatch between tree-sitter and the grammar package
        raise LanguageError(f"grammar for '{lang.value}' is incompatible: {e}") from e
