"""
PDF export of all documents.

Lays out every document (title, date, score, task, feedback, corrected
text or submission) one after the other with PyMuPDF. Text flow is
delegated to the correction renderer; this module only sequences the
sections, draws the placements and decides on separators and page breaks
between sections.
"""

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

import fitz  # PyMuPDF
from loguru import logger

from klar.config.constants import (
    MAX_SCORE, SECTION_MIN_SPACE,
    FONT_REGULAR, FONT_BOLD, FONT_ITALIC,
    COLOR_ACCENT, COLOR_BLACK, COLOR_GRAY, COLOR_SEPARATOR,
)
from klar.core.exceptions import ExportError
from klar.core.models import DocumentWithContent
from klar.rendering import (
    Cursor,
    LayoutResult,
    PageGeometry,
    TextStyle,
    ensure_line_fits,
    font_for,
    get_font,
    measure_text,
    next_line,
    render_correction,
    render_plain,
)
from klar.rendering.layout import TextMeasurer

# Baseline offset below the top of a line box, as a fraction of font size
BASELINE_FACTOR = 0.8
STRIKE_FACTOR = 0.3  # strike line height above the baseline

HEADER_SIZE = 20
TITLE_SIZE = 15
LABEL_SIZE = 10
SMALL_SIZE = 8
TITLE_DATE_RESERVE = 80  # horizontal space kept free for the date next to the title
TITLE_MIN_HEIGHT = 18


def format_score(score: float) -> str:
    """``30.0`` -> ``"30 / 45"``."""
    value = int(score) if float(score).is_integer() else score
    return f"{value} / {MAX_SCORE}"


def format_date(value: date) -> str:
    return value.strftime("%d.%m.%Y")


class PDFExporter:
    """
    Builds the multi-document PDF.

    Args:
        geometry: Page geometry of the body text
        measure: Text width function shared with the renderer
        today: Date printed in the header (default: today)
    """

    def __init__(
        self,
        geometry: Optional[PageGeometry] = None,
        measure: TextMeasurer = measure_text,
        today: Optional[date] = None
    ):
        self.geometry = geometry or PageGeometry()
        self.measure = measure
        self.today = today
        self._doc: Optional[fitz.Document] = None

    # ==================== PUBLIC API ====================

    def generate(self, items: Sequence[DocumentWithContent]) -> bytes:
        """
        Render documents to PDF.

        Args:
            items: Documents with content, in output order

        Returns:
            PDF file content

        Raises:
            ExportError: No documents, or PDF generation failed
        """
        if not items:
            raise ExportError("Keine Daten zum Exportieren")

        doc = fitz.open()
        self._doc = doc
        try:
            cursor = Cursor.origin(self.geometry)
            cursor = self._header(len(items), cursor)

            for i, item in enumerate(items):
                cursor = self._document(item, cursor)
                if i < len(items) - 1:
                    cursor = self._separator(cursor)

            self._page(cursor.page_index)
            data = doc.tobytes(garbage=3, deflate=True)
        except (RuntimeError, ValueError) as e:
            raise ExportError(f"PDF generation failed: {e}") from e
        finally:
            self._doc = None
            doc.close()

        logger.info(f"PDF exported: {len(items)} documents, {len(data)} bytes")
        return data

    # ==================== SECTIONS ====================

    def _header(self, count: int, cursor: Cursor) -> Cursor:
        cursor = self._text("Klar", cursor, HEADER_SIZE, TextStyle(COLOR_ACCENT, bold=True))

        today = self.today or date.today()
        plural = "e" if count != 1 else ""
        cursor = self._text(
            f"{format_date(today)}  ·  {count} Dokument{plural}",
            cursor, SMALL_SIZE, TextStyle(COLOR_GRAY),
        )

        cursor = self._move_down(cursor, 0.3, SMALL_SIZE)
        self._rule(cursor, COLOR_ACCENT, 0.5)
        return self._move_down(cursor, 1, SMALL_SIZE)

    def _document(self, item: DocumentWithContent, cursor: Cursor) -> Cursor:
        title_geometry = replace(
            self.geometry.with_font_size(TITLE_SIZE),
            width=self.geometry.width - TITLE_DATE_RESERVE,
        )
        title_top = ensure_line_fits(cursor, title_geometry)
        cursor = self._draw(
            render_plain(item.title or "Ohne Titel", title_geometry, self.measure, title_top,
                         TextStyle(COLOR_ACCENT, bold=True)),
            TITLE_SIZE,
        )
        cursor = next_line(cursor, title_geometry)

        creation = format_date(item.creation_date.date())
        date_width = self.measure(creation, SMALL_SIZE, False)
        self._insert(
            title_top.page_index, self.geometry.right - date_width, title_top.y,
            creation, SMALL_SIZE, FONT_REGULAR, COLOR_GRAY,
        )
        if cursor.page_index == title_top.page_index:
            cursor = replace(cursor, y=max(cursor.y, title_top.y + TITLE_MIN_HEIGHT))

        if item.review_score is not None:
            cursor = self._text(format_score(item.review_score), cursor, SMALL_SIZE,
                                TextStyle(COLOR_BLACK, bold=True))
            cursor = self._move_down(cursor, 0.3, SMALL_SIZE)

        for label, value in (("Aufgabe", item.task), ("Feedback", item.review_feedback)):
            if not value:
                continue
            cursor = self._label(label, cursor)
            cursor = self._text(value, cursor, self.geometry.font_size, TextStyle(COLOR_BLACK))
            cursor = self._move_down(cursor, 0.5)

        if item.correction:
            cursor = self._label("Korrigierter Text", cursor)
            cursor = self._draw(render_correction(item.correction, self.geometry, self.measure, cursor))
            cursor = next_line(cursor, self.geometry)
            cursor = self._move_down(cursor, 0.5)

        if not item.review_feedback:
            cursor = ensure_line_fits(cursor, self.geometry)
            self._insert(
                cursor.page_index, cursor.x, cursor.y, "Noch kein Feedback vorhanden",
                self.geometry.font_size, FONT_ITALIC, COLOR_GRAY,
            )
            cursor = next_line(cursor, self.geometry)
            cursor = self._move_down(cursor, 0.3)

            if item.submission_text:
                cursor = self._label("Einreichung", cursor)
                cursor = self._text(item.submission_text, cursor, self.geometry.font_size,
                                    TextStyle(COLOR_BLACK))
                cursor = self._move_down(cursor, 0.5)

        return cursor

    def _label(self, label: str, cursor: Cursor) -> Cursor:
        cursor = ensure_line_fits(cursor, self.geometry, SECTION_MIN_SPACE)
        cursor = self._text(label, cursor, LABEL_SIZE, TextStyle(COLOR_ACCENT, bold=True))
        return self._move_down(cursor, 0.2, LABEL_SIZE)

    def _separator(self, cursor: Cursor) -> Cursor:
        cursor = self._move_down(cursor, 0.3)
        cursor = ensure_line_fits(cursor, self.geometry, SECTION_MIN_SPACE)
        self._rule(cursor, COLOR_SEPARATOR, 0.15)
        return self._move_down(cursor, 1.2)

    # ==================== DRAWING ====================

    def _text(self, text: str, cursor: Cursor, font_size: float, style: TextStyle) -> Cursor:
        """Flow plain text from the cursor and return the start of the next line."""
        geometry = self.geometry.with_font_size(font_size)
        cursor = self._draw(render_plain(text, geometry, self.measure, cursor, style), font_size)
        return next_line(cursor, geometry)

    def _draw(self, result: LayoutResult, font_size: Optional[float] = None) -> Cursor:
        font_size = font_size or self.geometry.font_size
        for layout_page in result.pages:
            page = self._page(layout_page.index)
            for placement in layout_page.placements:
                baseline = placement.y + font_size * BASELINE_FACTOR
                page.insert_text(
                    (placement.x, baseline),
                    placement.text,
                    fontname=font_for(placement.bold),
                    fontsize=font_size,
                    color=placement.color,
                )
                if placement.strikethrough:
                    strike_y = baseline - font_size * STRIKE_FACTOR
                    page.draw_line(
                        (placement.x, strike_y),
                        (placement.x + placement.width, strike_y),
                        color=placement.color,
                        width=0.6,
                    )
        return result.cursor

    def _insert(self, page_index: int, x: float, y: float, text: str,
                font_size: float, fontname: str, color) -> None:
        self._page(page_index).insert_text(
            (x, y + font_size * BASELINE_FACTOR), text,
            fontname=fontname, fontsize=font_size, color=color,
        )

    def _rule(self, cursor: Cursor, color, width: float) -> None:
        self._page(cursor.page_index).draw_line(
            (self.geometry.left, cursor.y),
            (self.geometry.right, cursor.y),
            color=color,
            width=width,
        )

    def _move_down(self, cursor: Cursor, lines: float, font_size: Optional[float] = None) -> Cursor:
        font_size = font_size or self.geometry.font_size
        return replace(cursor, y=cursor.y + lines * self.geometry.with_font_size(font_size).line_height)

    def _page(self, index: int) -> fitz.Page:
        """Page by index, appending blank pages as needed."""
        while len(self._doc) <= index:
            page = self._doc.new_page(width=self.geometry.width, height=self.geometry.height)
            for fontname in (FONT_REGULAR, FONT_BOLD, FONT_ITALIC):
                page.insert_font(fontname=fontname, fontbuffer=get_font(fontname).buffer)
        return self._doc[index]


def generate_pdf(items: Sequence[DocumentWithContent], today: Optional[date] = None) -> bytes:
    """Render documents with the default A4 geometry."""
    return PDFExporter(today=today).generate(items)
