"""
Fonts shared by measuring and drawing.

Text is measured with the same ``fitz.Font`` that the PDF export embeds,
so layout widths match the drawn glyphs.
"""

from functools import lru_cache

import fitz  # PyMuPDF

from klar.config.constants import FONT_REGULAR, FONT_BOLD, FONT_ITALIC


@lru_cache(maxsize=None)
def get_font(fontname: str) -> fitz.Font:
    """Load a pymupdf-fonts font by its short name, once per process."""
    return fitz.Font(fontname)


def font_for(bold: bool = False, italic: bool = False) -> str:
    """Short font name for a style."""
    if bold:
        return FONT_BOLD
    return FONT_ITALIC if italic else FONT_REGULAR
