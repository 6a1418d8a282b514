import pytest

from synonym_index import SynonymIndex, group_fingerprint, load_synonym_index
from tuple_canonicalizer import CanonicalToken


def test_disjoint_groups_index_every_word():
    lines = ["run jog sprint", "big large huge", "cat"]
    index = SynonymIndex.build(lines)
    assert len(index) == 7


def test_words_in_same_line_share_fingerprint():
    index = SynonymIndex.build(["run jog sprint", "big large"])
    assert index["run"] == index["jog"] == index["sprint"]
    assert index["big"] == index["large"]
    assert index["run"] != index["big"]


def test_fingerprint_is_md5_of_line():
    index = SynonymIndex.build(["run jog sprint"])
    assert index["run"] == group_fingerprint("run jog sprint")
    assert len(index["run"]) == 32


def test_fingerprint_ignores_extra_whitespace():
    assert group_fingerprint("run  jog\tsprint ") == group_fingerprint("run jog sprint")


def test_later_line_overwrites_repeated_word():
    index = SynonymIndex.build(["a b", "b c"])
    assert index["b"] == group_fingerprint("b c")
    assert index["b"] == index["c"]
    assert index["a"] != index["b"]


@pytest.mark.parametrize("lines", [[], [""], ["   ", "\t"]])
def test_blank_lines_contribute_nothing(lines):
    assert len(SynonymIndex.build(lines)) == 0


def test_index_is_read_only():
    index = SynonymIndex.build(["run jog"])
    with pytest.raises(TypeError):
        index["walk"] = "x"  # type: ignore[index]


def test_group_of_unknown_word():
    index = SynonymIndex.build(["run jog"])
    assert index.group_of("walk") is None
    assert "walk" not in index


def test_load_from_file(tmp_path):
    path = tmp_path / "syns.txt"
    path.write_text("run jog sprint\nbig large\n", encoding="utf-8")
    index = load_synonym_index(path)
    assert index["sprint"] == group_fingerprint("run jog sprint")
    assert len(index) == 5


def test_load_missing_file_returns_empty_index(tmp_path, caplog):
    index = load_synonym_index(tmp_path / "missing.txt")
    assert len(index) == 0
    assert "Couldn't find file at" in caplog.text


def test_load_without_path():
    assert len(load_synonym_index(None)) == 0


def test_canonical_token_tags_known_and_unknown_words():
    index = SynonymIndex.build(["run jog"])
    assert index.canonical_token("jog") == CanonicalToken.group(group_fingerprint("run jog"))
    assert index.canonical_token("walk") == CanonicalToken.raw("walk")
