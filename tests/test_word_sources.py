import pytest

from word_sources import (
    FileWordSource,
    SourceUnavailable,
    TextWordSource,
    iter_file_words,
    iter_words,
    read_lines,
)


def test_iter_words_splits_on_any_whitespace():
    assert list(iter_words("go  run\tnow\n\nfast ")) == ["go", "run", "now", "fast"]


def test_iter_file_words(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text("go run\n  now\n", encoding="utf-8")
    assert list(iter_file_words(path)) == ["go", "run", "now"]


def test_missing_file_raises_on_iteration(tmp_path):
    words = iter_file_words(tmp_path / "missing.txt")
    with pytest.raises(SourceUnavailable) as exc:
        next(words)
    assert "Couldn't find file at" in str(exc.value)
    assert exc.value.path.name == "missing.txt"


def test_read_lines_strips_newlines(tmp_path):
    path = tmp_path / "syns.txt"
    path.write_text("run jog\r\nbig large\n", encoding="utf-8")
    assert read_lines(path) == ["run jog", "big large"]


def test_read_lines_missing(tmp_path):
    with pytest.raises(SourceUnavailable):
        read_lines(tmp_path / "missing.txt")


def test_source_unavailable_is_os_error(tmp_path):
    with pytest.raises(OSError):
        read_lines(tmp_path)


def test_file_source_can_be_iterated_twice(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text("a b c", encoding="utf-8")
    source = FileWordSource(path)
    assert list(source) == list(source) == ["a", "b", "c"]
    assert source.name == str(path)


def test_text_source():
    source = TextWordSource("a b  c", name="inline")
    assert list(source) == ["a", "b", "c"]
    assert len(source) == 3
    assert source.name == "inline"


def test_text_source_from_lines():
    assert list(TextWordSource(["a b", "c"])) == ["a", "b", "c"]


def test_unknown_encoding_is_source_unavailable(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text("a b c", encoding="utf-8")
    with pytest.raises(SourceUnavailable) as exc:
        next(iter_file_words(path, encoding="no-such-codec"))
    assert "unknown encoding" in exc.value.reason
    with pytest.raises(SourceUnavailable):
        read_lines(path, encoding="no-such-codec")
