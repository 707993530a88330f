import io

from ssr_tree_sitter import ASTWalker, Document, Language


def _doc(content: str) -> Document:
    return Document.from_content("sample.py", Language.PYTHON, content)


def test_format_tree():
    doc = _doc("x = 1\n")

    expected = (
        "(module [0, 0] - [1, 0]\n"
        "  (expression_statement [0, 0] - [0, 5]\n"
        "    (assignment [0, 0] - [0, 5]\n"
        "      left: (identifier [0, 0] - [0, 1])\n"
        "      right: (integer [0, 4] - [0, 5]))))\n"
    )
    assert doc.format_tree() == expected


def test_write_tree_to_stream():
    doc = _doc("x = 1\n")
    out = io.StringIO()

    doc.write_tree(out)

    assert out.getvalue() == doc.format_tree()


def test_unnamed_nodes_are_not_printed():
    doc = _doc("f(a, b)\n")

    text = doc.format_tree()

    assert "(argument_list" in text
    assert '"("' not in text
    assert "(," not in text
    assert all(line.lstrip().startswith(("(", "function:", "arguments:")) for line in text.splitlines())


def test_one_line_per_named_node():
    doc = _doc("def f(a):\n    return a\n")

    lines = doc.format_tree().splitlines()
    nodes = doc.nodes()

    assert len(lines) == len(nodes)
    for line, node in zip(lines, nodes):
        assert line.startswith("  " * node.depth)
        assert f"({node.kind} " in line
        if node.field_name:
            assert line.strip().startswith(f"{node.field_name}: ")


def test_walk_named_parents_and_fields():
    doc = _doc("x = 1\n")

    nodes = doc.nodes()

    assert [n.kind for n in nodes] == ["module", "expression_statement", "assignment", "identifier", "integer"]
    assert [n.depth for n in nodes] == [0, 1, 2, 3, 3]
    assert [n.parent for n in nodes] == [None, 0, 1, 2, 2]
    assert [n.field_name for n in nodes] == [None, None, None, "left", "right"]


def test_round_trip_reparse_reproduces_nodes():
    content = "class A:\n    def m(self, x):\n        return [i * x for i in range(3)]\n"
    first = _doc(content)
    second = Document.from_content("other.py", Language.PYTHON, first.content)

    def describe(doc):
        return [(n.kind, n.start_point, n.end_point, n.field_name) for n in doc.nodes()]

    assert describe(first) == describe(second)
    assert first.format_tree() == second.format_tree()


def test_deep_nesting_does_not_recurse():
    depth = 400
    doc = _doc("x = " + "(" * depth + "1" + ")" * depth + "\n")

    nodes = list(ASTWalker.walk_named(doc.tree))

    assert nodes[-1].kind == "integer"
    assert doc.format_tree().endswith(")" * (nodes[-1].depth + 1) + "\n")
