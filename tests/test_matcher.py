from ssr_tree_sitter import Document, Language, Point, Query


def _doc(content: str) -> Document:
    return Document.from_content("sample.py", Language.PYTHON, content)


def test_find_integer_literals():
    doc = _doc("x = 1\ny = 22\n")
    query = Query.compile(Language.PYTHON, "(integer) @num")

    matches = doc.find(query)

    assert [m.id for m in matches] == [0, 1]
    assert [m.pattern_index for m in matches] == [0, 0]
    assert [m.captures[0].text for m in matches] == ["1", "22"]

    second = matches[1].captures[0]
    assert second.index == 0
    assert second.name == "num"
    assert second.range.start_byte == 10
    assert second.range.end_byte == 12
    assert second.range.start_point == Point(1, 4)
    assert second.range.end_point == Point(1, 6)


def test_captures_ordered_by_position():
    doc = _doc("total = 42\n")
    query = Query.compile(Language.PYTHON, "(assignment left: (identifier) @name right: (integer) @value)")

    (match,) = doc.find(query)

    assert [(c.name, c.text) for c in match.captures] == [("name", "total"), ("value", "42")]
    assert match.capture("value").text == "42"
    assert match.capture("missing") is None


def test_alternative_patterns_report_their_index():
    doc = _doc('x = 1\ny = "a"\n')
    query = Query.compile(Language.PYTHON, "(integer) @num\n(string) @str")

    matches = doc.find(query)

    assert [(m.pattern_index, m.captures[0].text) for m in matches] == [(0, "1"), (1, '"a"')]


def test_no_matches():
    doc = _doc("x = 1\n")
    query = Query.compile(Language.PYTHON, "(string) @str")

    assert doc.find(query) == []


def test_matching_is_deterministic():
    doc = _doc("def f(a, b):\n    return a + b\n\nf(1, 2)\n")
    query = Query.compile(Language.PYTHON, "(identifier) @id\n(integer) @num")

    def summary():
        return [(m.id, m.pattern_index, [c.text for c in m.captures]) for m in doc.find(query)]

    assert summary() == summary()


def test_capture_text_uses_utf8_offsets():
    doc = _doc('s = "héllo"\nn = 7\n')
    query = Query.compile(Language.PYTHON, "(integer) @num")

    (match,) = doc.find(query)
    capture = match.captures[0]

    assert capture.text == "7"
    assert doc.source[capture.range.start_byte : capture.range.end_byte] == b"7"
