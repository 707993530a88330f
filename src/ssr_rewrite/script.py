"""
Per-match replacement scripts.

A script runs once per match, in match order, inside one shared global scope
per document. It sees two names: `found` (the current Match) and `document`,
whose single method `edit(range, replacement)` records a Change.

Each document's matches are processed in a separate worker process. The
worker enforces the step budget itself; the parent kills it when a single
invocation overruns its wall-clock limit, which also covers long calls into
builtins that the line tracer cannot interrupt.
"""

import multiprocessing as mp
import sys
import traceback
from pathlib import Path
from typing import Callable, Iterable, Optional

from ssr_tree_sitter.errors import SsrError
from ssr_tree_sitter.models import Match, Range

from .errors import ScriptBudgetExceeded, ScriptRuntimeError
from .models import Change, EditSet, is_char_boundary
from .sandbox import SAFE_BUILTINS, SCRIPT_FILENAME, BudgetExhausted, ExecutionBudget, compile_script

# Seconds a fresh worker may take to import its modules before the first match
WORKER_STARTUP_TIMEOUT = 30.0
# Slack on top of the per-invocation timeout for messaging between processes
WORKER_GRACE = 1.0


class ScriptDocument:
    """The only host capability visible to scripts: append-only edit recording"""

    __slots__ = ("_edit_set", "_source")

    def __init__(self, edit_set: EditSet, source: bytes):
        self._edit_set = edit_set
        self._source = source

    def edit(self, target, replacement) -> None:
        """Replace the source covered by `target` (a Range or a (start, end) byte pair)"""
        if isinstance(target, Range):
            start, end = target.start_byte, target.end_byte
        elif isinstance(target, (tuple, list)) and len(target) == 2:
            start, end = target
        else:
            raise TypeError("edit() expects a capture range or a (start, end) pair")
        if not isinstance(start, int) or not isinstance(end, int):
            raise TypeError("edit() range bounds must be integers")
        if not isinstance(replacement, str):
            raise TypeError("edit() replacement must be a string")
        size = len(self._source)
        if not 0 <= start <= end <= size:
            raise ValueError(f"edit() range {start}..{end} is outside the document (size {size})")
        for offset in (start, end):
            if not is_char_boundary(self._source, offset):
                raise ValueError(f"edit() offset {offset} is inside a multi-byte character")
        self._edit_set.record(Change(start, end, replacement))


class EditScript:
    """A replacement script compiled and validated once per invocation"""

    def __init__(self, source: str, budget: ExecutionBudget | None = None):
        self.source = source
        self.code = compile_script(source)
        self.budget = budget or ExecutionBudget()

    def run(self, path: Path, source: bytes, matches: Iterable[Match]) -> EditSet:
        """Run the script for every match and return the recorded edits.

        Any failure aborts the whole run; the partially filled edit set is
        dropped with it.
        """
        matches = list(matches)
        edit_set = EditSet()
        if not matches:
            return edit_set

        ctx = _worker_context()
        receiver, sender = ctx.Pipe(duplex=False)
        worker = ctx.Process(
            target=_worker_main,
            args=(sender, self.source, self.budget, path, source, matches),
            daemon=True,
        )
        worker.start()
        sender.close()
        try:
            changes = self._collect(receiver, path)
        finally:
            receiver.close()
            if worker.is_alive():
                worker.kill()
            worker.join()

        for change in changes:
            edit_set.record(change)
        return edit_set

    def run_here(
        self,
        path: Path,
        source: bytes,
        matches: Iterable[Match],
        on_match: Optional[Callable[[Match], None]] = None,
    ) -> EditSet:
        """Run the script in the calling process, guarded by the step budget only"""
        edit_set = EditSet()
        scope = {
            "__builtins__": SAFE_BUILTINS,
            "document": ScriptDocument(edit_set, source),
        }
        for match in matches:
            if on_match is not None:
                on_match(match)
            scope["found"] = match
            self._run_once(path, scope, match)
        return edit_set

    def _collect(self, receiver, path: Path) -> list[Change]:
        """Wait for the worker's messages, one deadline per script invocation"""
        current: int | None = None
        timeout = WORKER_STARTUP_TIMEOUT
        while True:
            if not receiver.poll(timeout):
                if current is None:
                    raise ScriptRuntimeError(path, f"script process did not start within {timeout:g}s")
                raise ScriptBudgetExceeded(path, f"match {current}: exceeded {self.budget.timeout:g}s")
            try:
                kind, payload = receiver.recv()
            except EOFError:
                raise ScriptRuntimeError(path, f"match {current}: script process exited unexpectedly") from None
            if kind == "match":
                current = payload
                timeout = self.budget.timeout + WORKER_GRACE
            elif kind == "done":
                return payload
            elif kind == "budget":
                raise ScriptBudgetExceeded(path, payload)
            else:
                raise ScriptRuntimeError(path, payload)

    def _run_once(self, path: Path, scope: dict, match: Match) -> None:
        try:
            with self.budget.enforce():
                exec(self.code, scope)
        except BudgetExhausted as e:
            raise ScriptBudgetExceeded(path, f"match {match.id}: {e}") from None
        except Exception as e:
            raise ScriptRuntimeError(path, f"match {match.id}: {_describe(e)}") from e


def _worker_context():
    if sys.platform.startswith("linux"):
        return mp.get_context("forkserver")
    return mp.get_context("spawn")


def _worker_main(conn, script_source: str, budget: ExecutionBudget, path: Path, source: bytes, matches):
    """Worker process entry: run the script over all matches and report back"""
    try:
        script = EditScript(script_source, budget)
        edit_set = script.run_here(path, source, matches, on_match=lambda m: conn.send(("match", m.id)))
        conn.send(("done", edit_set.drain()))
    except ScriptBudgetExceeded as e:
        conn.send(("budget", e.message))
    except SsrError as e:
        conn.send(("error", getattr(e, "message", str(e))))
    finally:
        conn.close()


def _describe(error: Exception) -> str:
    """Exception type and message plus the failing script line, if known"""
    message = f"{type(error).__name__}: {error}"
    frames = [f for f in traceback.extract_tb(error.__traceback__) if f.filename == SCRIPT_FILENAME]
    if frames:
        message += f" (line {frames[-1].lineno})"
    return message
