"""
Dialogue line extraction.
Decides which subtitle record is spoken dialogue and which is decorative
sign/song/karaoke text, based on the record's ASS style name.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from primedlistening.utils.text_normalizer import CleanLine, normalize

# Marked, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
LEADING_FIELDS = 9


@dataclass(frozen=True)
class SubtitleEvent:
    """
    One subtitle change reported by the player.

    `text` is the plain payload. `ass_full` carries one structured record per
    line when the player can provide it, otherwise None.
    """
    text: str
    ass_full: Optional[str] = None


@dataclass(frozen=True)
class DialogueRecord:
    marked: str
    start: str
    end: str
    style: str
    speaker: str
    margin_l: str
    margin_r: str
    margin_v: str
    effect: str
    text: str


def parse_dialogue_record(line: str) -> Optional[DialogueRecord]:
    """
    Split a structured record into its fields.

    Only the first nine commas separate fields; the text field keeps every
    comma after that. Returns None when fewer than nine separators exist.
    """
    parts = line.split(",", LEADING_FIELDS)
    if len(parts) <= LEADING_FIELDS:
        return None
    return DialogueRecord(*parts)


def _is_letter(ch: str) -> bool:
    return ch.isalpha()


def _has_word(text: str, word: str) -> bool:
    if not word:
        return False
    start = text.find(word)
    while start != -1:
        end = start + len(word)
        before_ok = start == 0 or not _is_letter(text[start - 1])
        after_ok = end == len(text) or not _is_letter(text[end])
        if before_ok and after_ok:
            return True
        start = text.find(word, start + 1)
    return False


def _glob_match(text: str, pattern: str) -> bool:
    # Anchored to the whole string; '*' is the only special character.
    pieces = pattern.split("*")
    head, tail = pieces[0], pieces[-1]
    if not text.startswith(head):
        return False
    pos = len(head)
    for middle in pieces[1:-1]:
        found = text.find(middle, pos)
        if found == -1:
            return False
        pos = found + len(middle)
    return len(text) - pos >= len(tail) and text.endswith(tail)


def match_pattern(style: str, pattern: str) -> bool:
    style = style.lower()
    pattern = pattern.lower()
    if "*" in pattern:
        return _glob_match(style, pattern)
    return _has_word(style, pattern)


class Blacklist:
    """
    Style names to skip.
    Stores lowercase patterns in the order they were given, without duplicates.
    """

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns: List[str] = []
        for pattern in patterns:
            pattern = pattern.strip().lower()
            if pattern and pattern not in self.patterns:
                self.patterns.append(pattern)

    @classmethod
    def from_string(cls, value: str) -> "Blacklist":
        return cls((value or "").split(","))

    def to_string(self) -> str:
        return ",".join(self.patterns)

    def matches(self, style: str) -> bool:
        return any(match_pattern(style, p) for p in self.patterns)

    def __contains__(self, style):
        return self.matches(style)

    def __len__(self):
        return len(self.patterns)

    def __eq__(self, other):
        if not isinstance(other, Blacklist):
            return NotImplemented
        return self.patterns == other.patterns

    def __repr__(self):
        return f"Blacklist({self.to_string()!r})"


def extract_dialogue_line(event: SubtitleEvent, blacklist: Blacklist) -> Optional[CleanLine]:
    """
    Pick the line to pause on from a subtitle event.

    Plain events are always dialogue. For structured events the first record
    whose style is not blacklisted wins, even if it normalizes to nothing;
    malformed records are skipped.
    """
    if event.ass_full is None:
        return normalize(event.text)

    for raw in event.ass_full.splitlines():
        if not raw.strip():
            continue
        record = parse_dialogue_record(raw)
        if record is None:
            continue
        if blacklist.matches(record.style):
            continue
        return normalize(record.text)

    return None
