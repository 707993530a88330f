from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional, TypeVar

import typer
from ssr_rewrite.diff import DocumentDiff
from ssr_rewrite.engine import RewriteEngine
from ssr_rewrite.script import EditScript
from ssr_tree_sitter.document import Document
from ssr_tree_sitter.errors import SsrError
from ssr_tree_sitter.languages import Language
from ssr_tree_sitter.models import Match
from ssr_tree_sitter.query import Query

from .config import SsrConfig
from .converters import error_to_report, match_to_report
from .walker import FileTypes, walk_files

app = typer.Typer(help="SSR - Structured Search and Replace over tree-sitter syntax trees")

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2

T = TypeVar("T")

LANGUAGE_HELP = f"Which language to use ({', '.join(lang.value for lang in Language)})"
QUERY_HELP = "Tree-sitter query as s-expression"
CONFIG_HELP = "Path to config file (default: .ssr.toml, then [tool.ssr] in pyproject.toml)"
DEFAULT_CONFIG = Path(".ssr.toml")


def _load_config(config_file: Optional[Path]) -> SsrConfig:
    if config_file is not None:
        if not config_file.is_file():
            raise _fail(f"config file {config_file} not found")
        return SsrConfig(config_file)
    if DEFAULT_CONFIG.exists():
        return SsrConfig(DEFAULT_CONFIG)
    return SsrConfig(Path("pyproject.toml"))


def _fail(message: str) -> typer.Exit:
    typer.echo(f"error: {message}", err=True)
    return typer.Exit(code=EXIT_ERROR)


def _resolve_language(name: Optional[str], config: SsrConfig) -> Language:
    name = name or config.language
    if not name:
        raise _fail("no language given (use --language or set 'language' in the config file)")
    try:
        return Language.from_name(name)
    except SsrError as e:
        raise _fail(str(e))


def _collect_files(
    paths: Optional[list[Path]],
    language: Language,
    types: Optional[list[str]],
    type_add: Optional[list[str]],
    config: SsrConfig,
) -> list[Path]:
    file_types = FileTypes()
    try:
        for definition in config.type_add + list(type_add or []):
            file_types.add(definition)
        globs = file_types.globs(types or [language.value])
    except ValueError as e:
        raise _fail(str(e))
    return list(walk_files(paths or [Path(".")], globs))


def _run_per_file(task: Callable[[Path], T], files: list[Path], jobs: int) -> list[T]:
    """Run `task` once per file; results keep the order of `files`"""
    if jobs <= 1 or len(files) <= 1:
        return [task(f) for f in files]
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        return list(pool.map(task, files))


def _describe_failure(path: Path, error: Exception) -> str:
    """Failure message that always names the offending path"""
    message = str(error)
    if not message.startswith(str(path)):
        message = f"{path}: {message}"
    return message


def _print_matches(doc: Document, matches: list[Match]) -> None:
    lines = list(doc.lines())
    width = len(str(max(len(lines), 1)))
    typer.echo(str(doc.path))
    for m in matches:
        for c in m.captures:
            typer.echo(f"{' ' * width}  capture: {c.name} [{m.pattern_index}]")
            first, last = c.range.start_point.row, c.range.end_point.row
            for row in range(first, min(last, len(lines) - 1) + 1):
                typer.echo(f"{row + 1:>{width}}: {lines[row]}")
        typer.echo()


@app.command()
def tree(
    file: Path = typer.Argument(..., help="File to print the syntax tree of"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help=LANGUAGE_HELP),
    config_file: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
):
    """Show the tree-sitter syntax tree of a file"""
    config = _load_config(config_file)
    lang = _resolve_language(language, config)
    try:
        doc = Document.open(file, lang)
    except SsrError as e:
        raise _fail(str(e))
    typer.echo(doc.format_tree(), nl=False)


@app.command()
def search(
    paths: list[Path] = typer.Argument(None, help="Files or directories to search"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help=LANGUAGE_HELP),
    query: str = typer.Option(..., "--query", "-q", help=QUERY_HELP),
    types: list[str] = typer.Option(None, "--type", "-t", help="Only search files of this type"),
    type_add: list[str] = typer.Option(None, "--type-add", help="Add a file type as name:glob"),
    json_output: bool = typer.Option(False, "--json", help="Print one JSON object per match"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Number of files processed in parallel"),
    config_file: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
):
    """Apply a query against all files and print every match"""
    config = _load_config(config_file)
    lang = _resolve_language(language, config)
    try:
        compiled = Query.compile(lang, query)
    except SsrError as e:
        raise _fail(str(e))
    files = _collect_files(paths, lang, types, type_add, config)

    def search_file(path: Path):
        try:
            doc = Document.open(path, lang)
            return doc, doc.find(compiled), None
        except SsrError as e:
            return None, [], e

    found = failed = False
    for path, (doc, matches, error) in zip(files, _run_per_file(search_file, files, jobs or config.jobs)):
        if error is not None:
            failed = True
            if json_output:
                typer.echo(error_to_report(path, error).model_dump_json(), err=True)
            else:
                typer.echo(_describe_failure(path, error), err=True)
            continue
        if not matches:
            continue
        found = True
        if json_output:
            for m in matches:
                typer.echo(match_to_report(doc.path, m).model_dump_json())
        else:
            _print_matches(doc, matches)

    if found:
        raise typer.Exit(code=EXIT_FOUND)
    raise typer.Exit(code=EXIT_ERROR if failed else EXIT_NOT_FOUND)


@app.command()
def replace(
    paths: list[Path] = typer.Argument(None, help="Files or directories to rewrite"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help=LANGUAGE_HELP),
    query: str = typer.Option(..., "--query", "-q", help=QUERY_HELP),
    replacement: str = typer.Option(..., "--replacement", "-r", help="Replacement script run once per match"),
    types: list[str] = typer.Option(None, "--type", "-t", help="Only rewrite files of this type"),
    type_add: list[str] = typer.Option(None, "--type-add", help="Add a file type as name:glob"),
    write: bool = typer.Option(False, "--write", "-w", help="Write changed files back to disk"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Number of files processed in parallel"),
    config_file: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
):
    """Search with a query and rewrite matches with a replacement script"""
    config = _load_config(config_file)
    lang = _resolve_language(language, config)
    try:
        compiled = Query.compile(lang, query)
        script = EditScript(replacement, config.budget())
    except SsrError as e:
        raise _fail(str(e))
    files = _collect_files(paths, lang, types, type_add, config)
    engine = RewriteEngine(config.budget())

    def rewrite_file(path: Path):
        try:
            doc = Document.open(path, lang)
            return DocumentDiff(doc, engine.edit(doc, compiled, script)), None
        except SsrError as e:
            return None, e

    changed = failed = False
    for path, (diff, error) in zip(files, _run_per_file(rewrite_file, files, jobs or config.jobs)):
        if error is not None:
            failed = True
            typer.echo(_describe_failure(path, error), err=True)
            continue
        if diff.is_empty():
            continue
        changed = True
        typer.echo(str(diff), nl=False)
        if write:
            try:
                path.write_bytes(diff.new.source)
            except OSError as e:
                failed = True
                typer.echo(f"{path}: cannot write file ({e})", err=True)

    if changed:
        raise typer.Exit(code=EXIT_FOUND)
    raise typer.Exit(code=EXIT_ERROR if failed else EXIT_NOT_FOUND)


if __name__ == "__main__":
    app()
