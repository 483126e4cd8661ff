"""
Parsing of correction markup.

A correction is plain text with inline edit markers::

    Ich --gehe-- ++gehst++ morgen ins Kino.

``--text--`` marks a deletion and ``++text++`` an addition. Parsing is
done in two pure passes: the text is first split into segments, then each
segment is split into tokens for the layout engine.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List


MARKER_PATTERN = re.compile(r"--(.*?)--|\+\+(.*?)\+\+")
WHITESPACE_SPLIT = re.compile(r"(\s+)")

DELETION_MARKER = "--"
ADDITION_MARKER = "++"


class SegmentKind(str, Enum):
    """Edit status of a run of text."""
    UNMARKED = "unmarked"
    DELETED = "deleted"
    ADDED = "added"


class TokenKind(str, Enum):
    """Layout unit type."""
    WORD = "word"
    SPACE = "space"
    NEWLINE = "newline"


@dataclass(frozen=True)
class Segment:
    """A run of text sharing one edit status."""
    text: str
    kind: SegmentKind = SegmentKind.UNMARKED


@dataclass(frozen=True)
class Token:
    """Smallest unit placed by the layout engine."""
    kind: TokenKind
    text: str
    segment_kind: SegmentKind = SegmentKind.UNMARKED


def parse_segments(text: str) -> List[Segment]:
    """
    Split marked text into segments, left to right.

    Matches are non-greedy and never span a line break. A delimiter
    without its closing counterpart stays in the text as literal
    characters, so every input parses.

    Args:
        text: Correction text with ``--``/``++`` markers

    Returns:
        Segments in source order; empty unmarked runs are skipped
    """
    segments: List[Segment] = []
    last = 0

    for match in MARKER_PATTERN.finditer(text):
        if match.start() > last:
            segments.append(Segment(text[last:match.start()]))

        deleted, added = match.group(1), match.group(2)
        if deleted is not None:
            segments.append(Segment(deleted, SegmentKind.DELETED))
        else:
            segments.append(Segment(added, SegmentKind.ADDED))
        last = match.end()

    if last < len(text):
        segments.append(Segment(text[last:]))

    return segments


def plain_segments(text: str) -> List[Segment]:
    """Wrap text without marker semantics as a single unmarked segment."""
    return [Segment(text)] if text else []


def format_segments(segments: List[Segment]) -> str:
    """Reassemble segments into marked text (inverse of parse_segments)."""
    parts = []
    for segment in segments:
        if segment.kind is SegmentKind.DELETED:
            parts.append(f"{DELETION_MARKER}{segment.text}{DELETION_MARKER}")
        elif segment.kind is SegmentKind.ADDED:
            parts.append(f"{ADDITION_MARKER}{segment.text}{ADDITION_MARKER}")
        else:
            parts.append(segment.text)
    return "".join(parts)


def tokenize(segments: List[Segment]) -> List[Token]:
    """
    Split segments into words, word gaps and forced line breaks.

    Each whitespace run becomes one SPACE token and consecutive gaps are
    collapsed, also across segment boundaries. Embedded newlines become
    NEWLINE tokens.
    """
    tokens: List[Token] = []

    for segment in segments:
        for line_number, line in enumerate(segment.text.split("\n")):
            if line_number > 0:
                tokens.append(Token(TokenKind.NEWLINE, "\n", segment.kind))

            for part in WHITESPACE_SPLIT.split(line):
                if not part:
                    continue
                if part.isspace():
                    if tokens and tokens[-1].kind is TokenKind.SPACE:
                        continue
                    tokens.append(Token(TokenKind.SPACE, " ", segment.kind))
                else:
                    tokens.append(Token(TokenKind.WORD, part, segment.kind))

    return tokens


def count_words(tokens: List[Token]) -> int:
    """Number of WORD tokens."""
    return sum(1 for token in tokens if token.kind is TokenKind.WORD)
