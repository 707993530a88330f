import pytest
from ssr_tree_sitter import Language, Query, QueryCompileError


def test_compile_query():
    query = Query.compile(Language.PYTHON, "(assignment left: (identifier) @name right: (_) @value)")

    assert query.pattern_count == 1
    assert query.capture_names == ["name", "value"]
    assert query.capture_name(0) == "name"
    assert query.capture_name(1) == "value"


def test_compile_query_with_alternatives():
    query = Query.compile(Language.PYTHON, "(integer) @num\n(string) @str")

    assert query.pattern_count == 2
    assert query.capture_index("str") == 1


def test_malformed_query():
    with pytest.raises(QueryCompileError) as exc_info:
        Query.compile(Language.PYTHON, "(assignment")

    assert exc_info.value.message
    assert "query error" in str(exc_info.value)


def test_unknown_node_kind():
    source = "(assignment)\n(no_such_node_kind) @x"

    with pytest.raises(QueryCompileError) as exc_info:
        Query.compile(Language.PYTHON, source)

    offset = exc_info.value.offset
    assert offset is None or 0 <= offset <= len(source)


def test_unknown_field():
    with pytest.raises(QueryCompileError):
        Query.compile(Language.PYTHON, "(assignment no_such_field: (identifier))")


def test_query_is_language_specific():
    Query.compile(Language.RUST, "(function_item name: (identifier) @name)")

    with pytest.raises(QueryCompileError):
        Query.compile(Language.PYTHON, "(function_item name: (identifier) @name)")
