# tests/test_text_normalizer.py
import pytest

from primedlistening.utils.text_normalizer import CleanLine, normalize, strip_markup


def test_override_tags_removed():
    line = normalize(r"{\i1}Hello{\i0} there")
    assert line == CleanLine("Hello there", 10)


def test_unescaped_comment_blocks_removed():
    assert strip_markup("{TL note}Where are you going?") == "Where are you going?"


def test_whitespace_trimmed_but_inner_spacing_kept():
    line = normalize("  two  words \n and more  ")
    assert line.text == "two  words \n and more"
    assert line.visible_chars == len("twowordsandmore")


def test_hard_line_breaks_become_newlines():
    assert strip_markup(r"First line\NSecond\hline") == "First line\nSecond line"


def test_multibyte_characters_count_once():
    assert normalize("こんにちは、世界").visible_chars == 8
    assert normalize("Привет мир").visible_chars == 9


@pytest.mark.parametrize("raw", ["", "   ", r"{\an8}", r"{\fad(200,200)}{\pos(10,20)}", "\n\t"])
def test_empty_or_markup_only(raw):
    assert normalize(raw) == CleanLine("", 0)


def test_unterminated_tag_left_literal():
    line = normalize(r"{\i1 never closed")
    assert line.text == r"{\i1 never closed"
    assert line.visible_chars == 15


def test_empty_braces_left_literal():
    assert strip_markup("a{}b") == "a{}b"


@pytest.mark.parametrize("raw", [
    r"{\i1}Hello{\i0}, world",
    "{{a}}b",
    "a{b{c}d}e",
    r"\{x}N tail",
    r"  {\an8}こんにちは\N世界  ",
    "{}{x}}",
    r"\\N",
])
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once.text) == once
