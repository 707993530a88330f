"""
Sandbox for replacement scripts.

Scripts are plain Python restricted to a pure subset: no imports, no
underscore names, only whitelisted attributes, no exception handlers that
could swallow the execution budget, and a small whitelist of builtins. Their only side effect is
calling `document.edit(...)`.
"""

import ast
import builtins
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from .errors import ScriptCompileError

SCRIPT_FILENAME = "<replacement>"

SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "bool", "chr", "dict", "divmod", "enumerate", "filter",
    "float", "frozenset", "hex", "int", "isinstance", "len", "list", "map", "max",
    "min", "oct", "ord", "range", "repr", "reversed", "round", "set", "slice",
    "sorted", "str", "sum", "tuple", "zip",
    "Exception", "ArithmeticError", "AttributeError", "IndexError", "KeyError",
    "LookupError", "NameError", "RuntimeError", "StopIteration", "TypeError",
    "ValueError", "ZeroDivisionError",
)

SAFE_BUILTINS = {name: getattr(builtins, name) for name in SAFE_BUILTIN_NAMES}

# Fields of the objects scripts are handed: Match, Capture, Range, Point,
# the edit capability, exception args and range/slice bounds
SCRIPT_ATTRIBUTES = frozenset({
    "id", "pattern_index", "captures", "capture",
    "index", "name", "range", "text",
    "start_byte", "end_byte", "start_point", "end_point", "row", "column",
    "edit", "args", "start", "stop", "step",
})

# Public methods of plain values; str.format can walk attributes through
# replacement fields
VALUE_METHODS = frozenset(
    name
    for kind in (str, list, dict, set, frozenset, tuple, int, float)
    for name in dir(kind)
    if not name.startswith("_")
) - {"format", "format_map", "mro"}

ALLOWED_ATTRIBUTES = SCRIPT_ATTRIBUTES | VALUE_METHODS

FORBIDDEN_NODES = (
    ast.Import,
    ast.ImportFrom,
    ast.ClassDef,
    ast.With,
    ast.AsyncWith,
    ast.AsyncFunctionDef,
    ast.AsyncFor,
    ast.Await,
    ast.Yield,
    ast.YieldFrom,
)


class ScriptValidator(ast.NodeVisitor):
    """Reject constructs that could escape the sandbox or the budget"""

    def generic_visit(self, node):
        if isinstance(node, FORBIDDEN_NODES):
            self._reject(node, f"'{type(node).__name__}' is not allowed in scripts")
        super().generic_visit(node)

    def visit_Name(self, node: ast.Name):
        if node.id.startswith("_"):
            self._reject(node, f"name '{node.id}' is not accessible")
        self.generic_visit(node)

    def visit_Attribute(self, node: ast.Attribute):
        if node.attr not in ALLOWED_ATTRIBUTES:
            self._reject(node, f"attribute '{node.attr}' is not accessible")
        self.generic_visit(node)

    def visit_FunctionDef(self, node: ast.FunctionDef):
        if node.name.startswith("_"):
            self._reject(node, f"function name '{node.name}' is not allowed")
        self.generic_visit(node)

    def visit_arg(self, node: ast.arg):
        if node.arg.startswith("_"):
            self._reject(node, f"argument name '{node.arg}' is not allowed")
        self.generic_visit(node)

    def visit_Try(self, node: ast.Try):
        if node.finalbody:
            self._reject(node, "'finally' is not allowed in scripts")
        for handler in node.handlers:
            if handler.type is None:
                self._reject(handler, "bare 'except' is not allowed in scripts")
            if isinstance(handler.type, ast.Name) and handler.type.id == "BaseException":
                self._reject(handler, "catching BaseException is not allowed in scripts")
        self.generic_visit(node)

    visit_TryStar = visit_Try

    @staticmethod
    def _reject(node: ast.AST, message: str):
        raise ScriptCompileError(message, getattr(node, "lineno", None))


def compile_script(source: str):
    """Parse, validate and compile a replacement script"""
    try:
        tree = ast.parse(source, filename=SCRIPT_FILENAME, mode="exec")
    except SyntaxError as e:
        raise ScriptCompileError(e.msg, e.lineno) from e
    ScriptValidator().visit(tree)
    return compile(tree, SCRIPT_FILENAME, "exec")


class BudgetExhausted(BaseException):
    """Raised inside the script frame; BaseException so `except Exception` cannot catch it"""


@dataclass(frozen=True)
class ExecutionBudget:
    """Per-invocation limits: executed script lines and wall-clock seconds"""

    max_steps: int = 100_000
    timeout: float = 5.0

    @contextmanager
    def enforce(self) -> Iterator[None]:
        """Trace script frames on the current thread and stop them when over budget"""
        steps = 0
        deadline = time.perf_counter() + self.timeout

        def trace_line(frame, event, arg):
            nonlocal steps
            if event == "line":
                steps += 1
                if steps > self.max_steps:
                    raise BudgetExhausted(f"exceeded {self.max_steps} steps")
                if time.perf_counter() > deadline:
                    raise BudgetExhausted(f"exceeded {self.timeout:g}s")
            return trace_line

        def trace_call(frame, event, arg):
            if frame.f_code.co_filename != SCRIPT_FILENAME:
                return None
            return trace_line(frame, event, arg)

        previous = sys.gettrace()
        sys.settrace(trace_call)
        try:
            yield
        finally:
            sys.settrace(previous)
