"""
SSR tree-sitter layer

This package provides:
- Supported languages and their grammars
- Parsed documents (source text + syntax tree)
- Compiled structural queries and pattern matching
- Syntax tree walking and printing
"""

__version__ = "0.1.0"

from .ast_walker import ASTWalker
from .document import Document
from .errors import IoError, LanguageError, ParseError, QueryCompileError, SsrError
from .languages import Language
from .models import Capture, Match, Point, Range, SyntaxNode
from .query import Query

__all__ = [
    "ASTWalker",
    "Capture",
    "Document",
    "IoError",
    "Language",
    "LanguageError",
    "Match",
    "ParseError",
    "Point",
    "Query",
    "QueryCompileError",
    "Range",
    "SsrError",
    "SyntaxNode",
]
