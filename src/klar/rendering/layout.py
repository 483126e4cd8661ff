"""
Line and page layout for correction text.

Places tokens word by word inside a fixed page geometry, wrapping lines
and starting new pages as needed. Layout is a fold of the pure step
:func:`place_token` over the token stream: the :class:`Cursor` is a value
that is passed in and returned, never shared between calls.

Rules:
    - A word that does not fit on the current line moves to the next one.
      The boundary is inclusive: a word ending exactly on the right
      margin stays.
    - A word wider than the printable width that starts a line is placed
      at the left margin and overflows the right margin. It is never split.
    - Before each word and after each line break the cursor moves to a new
      page when the current line would cross the bottom margin.
    - Word gaps advance by one space width and are dropped at line starts.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Tuple

from klar.config.constants import (
    RGB,
    PAGE_WIDTH, PAGE_HEIGHT, PAGE_MARGIN,
    BODY_FONT_SIZE, LINE_HEIGHT_FACTOR,
    COLOR_BLACK, COLOR_RED, COLOR_GREEN,
)
from klar.rendering.fonts import font_for, get_font
from klar.rendering.markup import (
    SegmentKind, Token, TokenKind,
    parse_segments, plain_segments, tokenize,
)

# (text, font_size, bold) -> width in points
TextMeasurer = Callable[[str, float, bool], float]


def measure_text(text: str, font_size: float, bold: bool = False) -> float:
    """Width of text in the embedded Noto Sans fonts."""
    return get_font(font_for(bold)).text_length(text, fontsize=font_size)


@dataclass(frozen=True)
class PageGeometry:
    """
    Page size, margins and type size for one render call.

    Defaults are A4 in points with ~24mm margins and 9pt text.
    ``line_height`` defaults to 1.4 times the font size.
    """
    width: float = PAGE_WIDTH
    height: float = PAGE_HEIGHT
    margin: float = PAGE_MARGIN
    font_size: float = BODY_FONT_SIZE
    line_height: Optional[float] = None

    def __post_init__(self):
        if self.line_height is None:
            object.__setattr__(self, "line_height", self.font_size * LINE_HEIGHT_FACTOR)
        if self.font_size <= 0 or self.line_height <= 0:
            raise ValueError("font_size and line_height must be positive")
        if self.printable_width <= 0:
            raise ValueError("margins leave no horizontal space")
        if self.bottom - self.top < self.line_height:
            raise ValueError("margins leave no room for a single line")

    @property
    def left(self) -> float:
        return self.margin

    @property
    def right(self) -> float:
        return self.width - self.margin

    @property
    def top(self) -> float:
        return self.margin

    @property
    def bottom(self) -> float:
        return self.height - self.margin

    @property
    def printable_width(self) -> float:
        return self.right - self.left

    def with_font_size(self, font_size: float) -> "PageGeometry":
        """Same page with another type size (line height rescaled)."""
        return replace(self, font_size=font_size, line_height=font_size * LINE_HEIGHT_FACTOR)


@dataclass(frozen=True)
class TextStyle:
    """Rendering attributes of a segment kind."""
    color: RGB = COLOR_BLACK
    bold: bool = False
    strikethrough: bool = False


CORRECTION_STYLES: Dict[SegmentKind, TextStyle] = {
    SegmentKind.UNMARKED: TextStyle(COLOR_BLACK),
    SegmentKind.DELETED: TextStyle(COLOR_RED, strikethrough=True),
    SegmentKind.ADDED: TextStyle(COLOR_GREEN, bold=True),
}


@dataclass(frozen=True)
class Cursor:
    """Layout position; ``y`` is the top of the current line."""
    x: float
    y: float
    page_index: int = 0

    @classmethod
    def origin(cls, geometry: PageGeometry, page_index: int = 0) -> "Cursor":
        """Top-left corner of the printable area."""
        return cls(geometry.left, geometry.top, page_index)

    def at_line_start(self, geometry: PageGeometry) -> bool:
        return self.x <= geometry.left


@dataclass(frozen=True)
class Placement:
    """A word positioned on a page."""
    text: str
    x: float
    y: float
    width: float
    color: RGB
    bold: bool = False
    strikethrough: bool = False


@dataclass
class Page:
    """Placements of one page, in placement order."""
    index: int
    placements: List[Placement] = field(default_factory=list)


@dataclass
class LayoutResult:
    """Pages touched by a render call and the cursor after the last token."""
    pages: List[Page]
    cursor: Cursor

    @property
    def placements(self) -> List[Placement]:
        return [p for page in self.pages for p in page.placements]


def next_line(cursor: Cursor, geometry: PageGeometry) -> Cursor:
    """Move to the left margin of the following line."""
    return Cursor(geometry.left, cursor.y + geometry.line_height, cursor.page_index)


def ensure_line_fits(cursor: Cursor, geometry: PageGeometry, needed: Optional[float] = None) -> Cursor:
    """
    Start a new page when ``needed`` points (default: one line) do not fit.

    Args:
        cursor: Current position
        geometry: Page geometry
        needed: Vertical space required below ``cursor.y``

    Returns:
        The same cursor, or the origin of the next page
    """
    if needed is None:
        needed = geometry.line_height
    if cursor.y + needed > geometry.bottom:
        return Cursor.origin(geometry, cursor.page_index + 1)
    return cursor


def place_token(
    cursor: Cursor,
    token: Token,
    geometry: PageGeometry,
    measure: TextMeasurer = measure_text,
    styles: Dict[SegmentKind, TextStyle] = CORRECTION_STYLES,
) -> Tuple[Cursor, Optional[Placement]]:
    """
    Place one token.

    Returns:
        Tuple of (cursor after the token, placement or None for gaps and
        line breaks)
    """
    if token.kind is TokenKind.NEWLINE:
        return ensure_line_fits(next_line(cursor, geometry), geometry), None

    style = styles[token.segment_kind]

    if token.kind is TokenKind.SPACE:
        if cursor.at_line_start(geometry):
            return cursor, None
        space = measure(" ", geometry.font_size, style.bold)
        return replace(cursor, x=cursor.x + space), None

    width = measure(token.text, geometry.font_size, style.bold)
    if not cursor.at_line_start(geometry) and cursor.x + width > geometry.right:
        cursor = next_line(cursor, geometry)
    cursor = ensure_line_fits(cursor, geometry)

    placement = Placement(
        text=token.text,
        x=cursor.x,
        y=cursor.y,
        width=width,
        color=style.color,
        bold=style.bold,
        strikethrough=style.strikethrough,
    )
    return replace(cursor, x=cursor.x + width), placement


def layout_tokens(
    tokens: List[Token],
    geometry: PageGeometry,
    measure: TextMeasurer = measure_text,
    cursor: Optional[Cursor] = None,
    styles: Dict[SegmentKind, TextStyle] = CORRECTION_STYLES,
) -> LayoutResult:
    """
    Lay out a token stream.

    Args:
        tokens: Output of :func:`tokenize`
        geometry: Page geometry
        measure: Text width function
        cursor: Starting position (default: origin of page 0)
        styles: Style per segment kind

    Returns:
        One Page per page index from the starting cursor's page to the
        final cursor's page, pages without words included
    """
    if cursor is None:
        cursor = Cursor.origin(geometry)

    first_page = cursor.page_index
    pages: List[Page] = [Page(first_page)]

    for token in tokens:
        cursor, placement = place_token(cursor, token, geometry, measure, styles)
        while pages[-1].index < cursor.page_index:
            pages.append(Page(pages[-1].index + 1))
        if placement is not None:
            pages[-1].placements.append(placement)

    return LayoutResult(pages=pages, cursor=cursor)


def render_correction(
    text: str,
    geometry: Optional[PageGeometry] = None,
    measure: TextMeasurer = measure_text,
    cursor: Optional[Cursor] = None,
) -> LayoutResult:
    """Lay out correction text, styling deletions and additions."""
    geometry = geometry or PageGeometry()
    return layout_tokens(tokenize(parse_segments(text)), geometry, measure, cursor)


def render_plain(
    text: str,
    geometry: Optional[PageGeometry] = None,
    measure: TextMeasurer = measure_text,
    cursor: Optional[Cursor] = None,
    style: TextStyle = TextStyle(),
) -> LayoutResult:
    """Lay out text without marker semantics in a single style."""
    geometry = geometry or PageGeometry()
    return layout_tokens(
        tokenize(plain_segments(text)), geometry, measure, cursor,
        styles={SegmentKind.UNMARKED: style},
    )
