import itertools

import pytest
from ssr_rewrite import (
    Change,
    EditSet,
    InvalidEditError,
    OverlappingEditsError,
    RewriteEngine,
    apply_changes,
    edit,
)
from ssr_tree_sitter import Document, Language, SsrError


def test_apply_single_change():
    assert apply_changes("x = 1\n", [Change(4, 5, "2")]) == "x = 2\n"


def test_apply_no_changes_returns_content():
    content = "x = 1\r\n"

    assert apply_changes(content, []) == content


def test_changes_with_different_lengths():
    content = "a = 1\nb = 2\nc = 3\n"
    changes = [Change(4, 5, "1000"), Change(10, 11, ""), Change(16, 17, "three")]

    assert apply_changes(content, changes) == "a = 1000\nb = \nc = three\n"


def test_application_is_order_independent():
    content = "alpha beta gamma delta"
    changes = [Change(0, 5, "A"), Change(6, 10, "BB"), Change(11, 16, ""), Change(22, 22, "!")]
    expected = "A BB  delta!"

    for permutation in itertools.permutations(changes):
        assert apply_changes(content, list(permutation)) == expected


def test_adjacent_changes_are_allowed():
    assert apply_changes("abcdef", [Change(0, 3, "X"), Change(3, 6, "Y")]) == "XY"


def test_overlapping_changes_are_rejected():
    with pytest.raises(OverlappingEditsError) as exc_info:
        apply_changes("0123456789", [Change(3, 7, "x"), Change(5, 6, "y")])

    assert exc_info.value.first == Change(3, 7, "x")
    assert exc_info.value.second == Change(5, 6, "y")
    assert "overlap" in str(exc_info.value)


def test_equal_starts_are_rejected():
    with pytest.raises(OverlappingEditsError) as exc_info:
        apply_changes("0123456789", [Change(2, 2, "a"), Change(2, 2, "b")])

    assert "same offset" in str(exc_info.value)


def test_out_of_bounds_change():
    with pytest.raises(InvalidEditError) as exc_info:
        apply_changes("abc", [Change(1, 10, "x")])

    assert isinstance(exc_info.value, SsrError)
    assert exc_info.value.change == Change(1, 10, "x")
    assert "outside the content" in str(exc_info.value)


def test_change_splitting_a_character_is_rejected():
    with pytest.raises(InvalidEditError) as exc_info:
        apply_changes("s = 'é'\n", [Change(6, 6, "z")])

    assert "multi-byte character" in str(exc_info.value)


def test_offsets_are_utf8_bytes():
    content = 'name = "é"\nx = 1\n'
    start = content.encode("utf8").index(b"1")

    assert apply_changes(content, [Change(start, start + 1, "ü")]) == 'name = "é"\nx = ü\n'


def test_engine_apply_drains_edit_set():
    doc = Document.from_content("sample.py", Language.PYTHON, "x = 1\n")
    edit_set = EditSet()
    edit_set.record(Change(0, 1, "y"))

    new = RewriteEngine().apply(doc, edit_set)

    assert new.content == "y = 1\n"
    assert len(edit_set) == 0
    assert [n.kind for n in new.nodes()] == [n.kind for n in doc.nodes()]


def test_overlapping_script_edits_fail():
    doc = Document.from_content("sample.py", Language.PYTHON, "x = 1\n")
    script = """
for cap in found.captures:
    document.edit(cap.range, cap.name)
"""

    with pytest.raises(OverlappingEditsError):
        edit(doc, "(assignment right: (integer) @num) @assign", script)

    assert doc.content == "x = 1\n"


def test_edit_multiple_matches():
    doc = Document.from_content("sample.py", Language.PYTHON, "def f(a, b):\n    return a + b\n")
    script = """
cap = found.captures[0]
if cap.text == "a":
    document.edit(cap.range, "first")
"""

    new = edit(doc, "(identifier) @id", script)

    assert new.content == "def f(first, b):\n    return first + b\n"
