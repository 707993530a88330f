"""
SSR rewrite layer

This package provides:
- Replacement scripts run once per match in a sandbox
- Edit sets and tail-first edit application
- Unified diffs between documents
"""

__version__ = "0.1.0"

from .diff import DocumentDiff
from .engine import RewriteEngine, apply_changes, edit
from .errors import (
    InvalidEditError,
    OverlappingEditsError,
    ScriptBudgetExceeded,
    ScriptCompileError,
    ScriptRuntimeError,
)
from .models import Change, EditSet
from .sandbox import ExecutionBudget
from .script import EditScript, ScriptDocument

__all__ = [
    "Change",
    "DocumentDiff",
    "EditScript",
    "EditSet",
    "ExecutionBudget",
    "InvalidEditError",
    "OverlappingEditsError",
    "RewriteEngine",
    "ScriptBudgetExceeded",
    "ScriptCompileError",
    "ScriptDocument",
    "ScriptRuntimeError",
    "apply_changes",
    "edit",
]
