"""
Subtitle text normalization.
Strips ASS override blocks from a subtitle payload and counts the characters
a viewer actually reads.
"""
import re
from dataclasses import dataclass

# {\i1}, {\fad(200,200)}, {comment}; an empty {} or an unterminated { stays literal
_OVERRIDE_BLOCK = re.compile(r"\{[^}]+\}")
_HARD_BREAK = re.compile(r"\\[Nn]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class CleanLine:
    """A subtitle line with markup removed, ready for display and comparison."""
    text: str
    visible_chars: int


def strip_markup(text: str) -> str:
    if not text:
        return ""
    text = _OVERRIDE_BLOCK.sub("", text)
    text = _HARD_BREAK.sub("\n", text)
    text = text.replace("\\h", " ")
    return text.strip()


def _visible_count(clean: str) -> int:
    # str is a sequence of code points, so a CJK or Cyrillic character counts once
    return len(_WHITESPACE.sub("", clean))


def normalize(raw: str) -> CleanLine:
    """Strip markup from raw and count the characters left, ignoring all whitespace."""
    clean = strip_markup(raw)
    return CleanLine(text=clean, visible_chars=_visible_count(clean))
