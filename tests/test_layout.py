"""
Tests for line and page layout.

Uses a fixed-width measurer (5pt per character at 10pt) on a 100x100 page
with 10pt margins: 16 characters per line, 8 lines per page.
"""

import pytest

from klar.config.constants import COLOR_BLACK, COLOR_GREEN, COLOR_RED
from klar.rendering import (
    Cursor, PageGeometry, Token, TokenKind, TextStyle,
    count_words, ensure_line_fits, font_for, get_font, measure_text,
    parse_segments, place_token, render_correction, render_plain, tokenize,
)


def positions(result):
    return [(p.text, p.x, p.y) for p in result.placements]


def test_simple_line(small_page, measure):
    result = render_correction("Hallo Welt", small_page, measure)

    assert len(result.pages) == 1
    assert positions(result) == [("Hallo", 10, 10), ("Welt", 40, 10)]
    assert result.placements[0].width == 25


def test_correction_styles(small_page, measure):
    result = render_correction("--Hallo-- ++Hi++ Welt", small_page, measure)
    hallo, hi, welt = result.placements

    assert (hallo.x, hi.x, welt.x) == (10, 40, 55)
    assert hallo.color == COLOR_RED and hallo.strikethrough and not hallo.bold
    assert hi.color == COLOR_GREEN and hi.bold and not hi.strikethrough
    assert welt.color == COLOR_BLACK and not welt.bold and not welt.strikethrough


def test_forced_line_break(small_page, measure):
    result = render_correction("Zeile1\nZeile2", small_page, measure)

    assert positions(result) == [("Zeile1", 10, 10), ("Zeile2", 10, 20)]


def test_empty_line_advances(small_page, measure):
    result = render_correction("a\n\nb", small_page, measure)

    assert positions(result) == [("a", 10, 10), ("b", 10, 30)]


def test_wrap_when_word_does_not_fit(small_page, measure):
    result = render_correction("aaaa bbbbbbbbbbbb", small_page, measure)

    assert positions(result) == [("aaaa", 10, 10), ("bbbbbbbbbbbb", 10, 20)]


def test_word_ending_on_margin_stays(small_page, measure):
    result = render_correction("aaaa bbbbbbbbbbb", small_page, measure)

    # 35 + 55 == right margin
    assert positions(result) == [("aaaa", 10, 10), ("bbbbbbbbbbb", 35, 10)]


def test_oversized_word_at_line_start_overflows(small_page, measure):
    word = "abcdefghijklmnopqrstuvwxyz"
    result = render_correction(word, small_page, measure)

    placement = result.placements[0]
    assert (placement.x, placement.y) == (10, 10)
    assert placement.x + placement.width > small_page.right


def test_oversized_word_after_other_word_wraps_first(small_page, measure):
    result = render_correction("ab abcdefghijklmnopqrstuvwxyz", small_page, measure)

    assert positions(result) == [("ab", 10, 10), ("abcdefghijklmnopqrstuvwxyz", 10, 20)]


def test_leading_space_is_dropped(small_page, measure):
    result = render_correction("   Hallo", small_page, measure)

    assert positions(result) == [("Hallo", 10, 10)]


def test_gap_after_wrap_is_dropped(small_page, measure):
    result = render_correction("aaaaaaaaaaaaaaaa b", small_page, measure)

    # the gap advances x past the right margin, the word then wraps
    assert positions(result)[1] == ("b", 10, 20)


def test_collapsed_gap_across_segments(small_page, measure):
    result = render_correction("a ++ b++", small_page, measure)

    assert positions(result) == [("a", 10, 10), ("b", 20, 10)]


def test_page_break(small_page, measure):
    text = "\n".join(f"w{i}" for i in range(9))
    result = render_correction(text, small_page, measure)

    assert len(result.pages) == 2
    assert [p.y for p in result.pages[0].placements] == [10, 20, 30, 40, 50, 60, 70, 80]
    assert positions(result)[-1] == ("w8", 10, 10)
    assert result.pages[1].index == 1
    assert result.cursor.page_index == 1


def test_line_ending_exactly_on_bottom_fits(small_page, measure):
    result = render_correction("x", small_page, measure, Cursor(10, 80, 0))

    assert len(result.pages) == 1
    assert positions(result) == [("x", 10, 80)]


def test_start_cursor_near_bottom_breaks_page(small_page, measure):
    result = render_correction("Wort", small_page, measure, Cursor(10, 85, 0))

    assert [page.index for page in result.pages] == [0, 1]
    assert result.pages[0].placements == []
    assert positions(result) == [("Wort", 10, 10)]


def test_start_cursor_continues_line(small_page, measure):
    result = render_correction("b", small_page, measure, Cursor(50, 30, 2))

    assert positions(result) == [("b", 50, 30)]
    assert result.pages[0].index == 2


def test_empty_text(small_page, measure):
    result = render_correction("", small_page, measure)

    assert len(result.pages) == 1
    assert result.placements == []
    assert result.cursor == Cursor(10, 10, 0)


def test_render_plain_uses_single_style(small_page, measure):
    style = TextStyle(color=(0.1, 0.2, 0.3), bold=True)
    result = render_plain("--kein-- Markup", small_page, measure, style=style)

    assert [p.text for p in result.placements] == ["--kein--", "Markup"]
    assert all(p.color == style.color and p.bold for p in result.placements)


def test_place_token_is_pure(small_page, measure):
    cursor = Cursor.origin(small_page)
    token = Token(TokenKind.WORD, "Hallo")

    first = place_token(cursor, token, small_page, measure)
    second = place_token(cursor, token, small_page, measure)

    assert first == second
    assert cursor == Cursor(10, 10, 0)
    assert first[0] == Cursor(35, 10, 0)


def test_ensure_line_fits_custom_space(small_page):
    cursor = Cursor(10, 70, 0)

    assert ensure_line_fits(cursor, small_page) == cursor
    assert ensure_line_fits(cursor, small_page, 25) == Cursor(10, 10, 1)


def test_default_line_height():
    geometry = PageGeometry(font_size=10)

    assert geometry.line_height == pytest.approx(14)
    assert geometry.with_font_size(20).line_height == pytest.approx(28)


@pytest.mark.parametrize("kwargs", [
    {"font_size": 0},
    {"width": 100, "margin": 60},
    {"height": 30, "margin": 10, "font_size": 10, "line_height": 20},
])
def test_invalid_geometry(kwargs):
    with pytest.raises(ValueError):
        PageGeometry(**kwargs)


SAMPLES = [
    "Ich habe --gestern-- ++gestern++ einen Brief geschrieben.",
    "Lieber Max,\n\nich --freue-- ++freue++ mich auf --dein-- ++deinen++ Besuch.\nViele Grüße",
    " ".join(["Wort"] * 200),
    "kurz\n" * 30,
    "++a++--b--++c++ d  e\tf",
]


@pytest.mark.parametrize("text", SAMPLES)
def test_every_word_placed_once(text, small_page, measure):
    result = render_correction(text, small_page, measure)

    assert len(result.placements) == count_words(tokenize(parse_segments(text)))


@pytest.mark.parametrize("text", SAMPLES)
def test_words_stay_inside_printable_area(text, small_page, measure):
    result = render_correction(text, small_page, measure)

    for placement in result.placements:
        assert placement.x >= small_page.left
        assert placement.x + placement.width <= small_page.right
        assert placement.y >= small_page.top
        assert placement.y + small_page.line_height <= small_page.bottom


@pytest.mark.parametrize("text", SAMPLES)
def test_layout_is_deterministic(text, small_page, measure):
    assert render_correction(text, small_page, measure) == render_correction(text, small_page, measure)


def test_pages_are_consecutive(small_page, measure):
    result = render_correction(" ".join(["Wort"] * 200), small_page, measure)

    assert [page.index for page in result.pages] == list(range(len(result.pages)))
    assert len(result.pages) > 1


def test_default_measurer_uses_embedded_font():
    result = render_correction("Hallo ++Welt++")
    regular, bold = result.placements

    assert regular.width > 0
    assert bold.bold
    assert regular.x == PageGeometry().left


@pytest.mark.parametrize("char", ["„", "“", "–", "€", "…", "ß", "ü"])
def test_font_covers_german_typography(char):
    font = get_font(font_for())

    assert font.has_glyph(ord(char))
    assert get_font(font_for(bold=True)).has_glyph(ord(char))


def test_typographic_quotes_measured_as_real_glyphs():
    widths = {round(measure_text(char, 10), 3) for char in "„“–€…"}

    assert len(widths) > 1
    assert measure_text("„Hallo“", 10) > measure_text("Hallo", 10)
