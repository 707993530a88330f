import pytest
from ssr_tree_sitter import Document, IoError, Language, LanguageError


def test_open_reads_file(tmp_path):
    file_path = tmp_path / "main.py"
    file_path.write_text("x = 1\ny = 2\n")

    doc = Document.open(file_path, Language.PYTHON)

    assert doc.path == file_path
    assert doc.content == "x = 1\ny = 2\n"
    assert list(doc.lines()) == ["x = 1", "y = 2"]
    assert doc.tree.root_node.type == "module"


def test_open_keeps_crlf_bytes(tmp_path):
    file_path = tmp_path / "main.py"
    file_path.write_bytes(b"x = 1\r\n")

    doc = Document.open(file_path, Language.PYTHON)

    assert doc.source == b"x = 1\r\n"


def test_open_missing_file(tmp_path):
    missing = tmp_path / "missing.py"

    with pytest.raises(IoError) as exc_info:
        Document.open(missing, Language.PYTHON)

    assert exc_info.value.path == missing
    assert str(missing) in str(exc_info.value)


def test_open_undecodable_file(tmp_path):
    file_path = tmp_path / "binary.py"
    file_path.write_bytes(b"\xff\xfe\x00bad")

    with pytest.raises(IoError):
        Document.open(file_path, Language.PYTHON)


def test_from_content_does_not_touch_filesystem(tmp_path):
    doc = Document.from_content(tmp_path / "not_there.rs", Language.RUST, "fn main() {}\n")

    assert not (tmp_path / "not_there.rs").exists()
    assert doc.tree.root_node.type == "source_file"
    assert doc.has_syntax_errors is False


def test_syntax_errors_still_produce_a_tree():
    doc = Document.from_content("broken.py", Language.PYTHON, "def (:\n")

    assert doc.has_syntax_errors is True
    assert doc.tree.root_node is not None


def test_bazel_uses_python_grammar():
    doc = Document.from_content("BUILD", Language.BAZEL, 'cc_library(name = "x")\n')

    assert doc.tree.root_node.type == "module"


def test_c_language():
    doc = Document.from_content("main.c", Language.C, "int main(void) { return 0; }\n")

    assert doc.tree.root_node.type == "translation_unit"


def test_language_from_name():
    assert Language.from_name(" Python ") is Language.PYTHON
    assert Language.from_name("RUST") is Language.RUST
    assert str(Language.BAZEL) == "bazel"


def test_language_from_name_unknown():
    with pytest.raises(LanguageError) as exc_info:
        Language.from_name("cobol")

    assert "cobol" in str(exc_info.value)


def test_language_file_globs():
    assert "*.py" in Language.PYTHON.file_globs
    assert "BUILD" in Language.BAZEL.file_globs
