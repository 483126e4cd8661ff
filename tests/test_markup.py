"""
Tests for correction markup parsing and tokenization.
"""

import pytest

from klar.rendering.markup import (
    Segment, SegmentKind, TokenKind,
    parse_segments, format_segments, plain_segments, tokenize, count_words,
)


def test_parse_mixed_markers():
    """Deletions, additions and plain text come out in source order."""
    segments = parse_segments("--Hallo-- ++Hi++ Welt")

    assert segments == [
        Segment("Hallo", SegmentKind.DELETED),
        Segment(" "),
        Segment("Hi", SegmentKind.ADDED),
        Segment(" Welt"),
    ]


def test_parse_empty_text():
    assert parse_segments("") == []


def test_parse_without_markers():
    assert parse_segments("Ich gehe heute.") == [Segment("Ich gehe heute.")]


def test_adjacent_spans_have_no_empty_gap():
    segments = parse_segments("--a--++b++")

    assert segments == [
        Segment("a", SegmentKind.DELETED),
        Segment("b", SegmentKind.ADDED),
    ]


def test_unterminated_delimiter_is_literal():
    assert parse_segments("Das --ist falsch") == [Segment("Das --ist falsch")]


def test_markers_do_not_span_lines():
    assert parse_segments("--a\nb--") == [Segment("--a\nb--")]


def test_empty_marked_span_is_kept():
    assert parse_segments("x----y") == [
        Segment("x"),
        Segment("", SegmentKind.DELETED),
        Segment("y"),
    ]


def test_non_greedy_match():
    segments = parse_segments("--a-- und --b--")

    assert [s.kind for s in segments] == [
        SegmentKind.DELETED, SegmentKind.UNMARKED, SegmentKind.DELETED,
    ]
    assert segments[0].text == "a"
    assert segments[2].text == "b"


@pytest.mark.parametrize("text", [
    "Hallo Welt",
    "--x-- ++y++ z",
    "----",
    "++a++++b++",
    "text --unclosed",
    "Zeile\n--eins--\n++zwei++",
    "a -- b ++ c",
])
def test_format_inverts_parse(text):
    assert format_segments(parse_segments(text)) == text


def test_plain_segments_ignore_markers():
    assert plain_segments("--nicht markiert--") == [Segment("--nicht markiert--")]
    assert plain_segments("") == []


def test_tokenize_words_and_gaps():
    tokens = tokenize(parse_segments("Ich  bin\tda"))

    assert [t.kind for t in tokens] == [
        TokenKind.WORD, TokenKind.SPACE, TokenKind.WORD, TokenKind.SPACE, TokenKind.WORD,
    ]
    assert [t.text for t in tokens if t.kind is TokenKind.WORD] == ["Ich", "bin", "da"]


def test_tokenize_collapses_gaps_across_segments():
    tokens = tokenize(parse_segments("a ++ b++"))

    assert [t.kind for t in tokens] == [TokenKind.WORD, TokenKind.SPACE, TokenKind.WORD]
    assert tokens[2].segment_kind is SegmentKind.ADDED


def test_tokenize_newlines():
    tokens = tokenize(parse_segments("eins\n\nzwei"))

    assert [t.kind for t in tokens] == [
        TokenKind.WORD, TokenKind.NEWLINE, TokenKind.NEWLINE, TokenKind.WORD,
    ]


def test_tokens_keep_segment_kind():
    tokens = tokenize(parse_segments("--falsch-- ++richtig++"))
    words = [t for t in tokens if t.kind is TokenKind.WORD]

    assert words[0].segment_kind is SegmentKind.DELETED
    assert words[1].segment_kind is SegmentKind.ADDED


def test_count_words():
    assert count_words(tokenize(parse_segments("--Das-- ++Der++ Hund  bellt\nlaut"))) == 5
    assert count_words(tokenize([])) == 0
