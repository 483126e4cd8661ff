"""
Correction rendering.

Turns marked correction text into styled, word-wrapped, paginated
placements that a PDF backend can draw.
"""

from klar.rendering.markup import (
    Segment,
    SegmentKind,
    Token,
    TokenKind,
    parse_segments,
    plain_segments,
    format_segments,
    tokenize,
    count_words,
)
from klar.rendering.fonts import get_font, font_for
from klar.rendering.layout import (
    PageGeometry,
    TextStyle,
    Cursor,
    Placement,
    Page,
    LayoutResult,
    CORRECTION_STYLES,
    measure_text,
    next_line,
    ensure_line_fits,
    place_token,
    layout_tokens,
    render_correction,
    render_plain,
)

__all__ = [
    'Segment',
    'SegmentKind',
    'Token',
    'TokenKind',
    'parse_segments',
    'plain_segments',
    'format_segments',
    'tokenize',
    'count_words',
    'PageGeometry',
    'TextStyle',
    'Cursor',
    'Placement',
    'Page',
    'LayoutResult',
    'CORRECTION_STYLES',
    'measure_text',
    'next_line',
    'ensure_line_fits',
    'place_token',
    'layout_tokens',
    'render_correction',
    'render_plain',
    'get_font',
    'font_for',
]
