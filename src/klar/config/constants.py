"""
Constants and configuration values for Klar.

Defines defaults, limits and the PDF palette.
"""

from typing import Final, Tuple

RGB = Tuple[float, float, float]

# AI Model Configuration
MAX_TOKENS: Final[int] = 4096
TEMPERATURE: Final[float] = 0.3
MAX_SCORE: Final[int] = 45  # TELC B1 writing scale

# API Timeouts (seconds)
API_CONNECT_TIMEOUT: Final[float] = 10.0
API_READ_TIMEOUT: Final[float] = 120.0

# Retry Configuration
MAX_RETRIES: Final[int] = 3  # transport errors towards the AI API
MAX_TITLE_RETRIES: Final[int] = 3  # generated exercise title collisions

# Storage
DATA_DIR: Final[str] = "data"
DB_FILENAME: Final[str] = "klar.sqlite"
BACKUP_FILENAME: Final[str] = "klar_backup.json"
PDF_FILENAME: Final[str] = "Klar.pdf"
MAX_IMPORT_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# Pagination
DEFAULT_PAGE_SIZE: Final[int] = 5
MAX_PAGE_SIZE: Final[int] = 100

# Document ids
ID_RANDOM_LENGTH: Final[int] = 9

# PDF page geometry (points, A4)
PAGE_WIDTH: Final[float] = 595.28
PAGE_HEIGHT: Final[float] = 841.89
PAGE_MARGIN: Final[float] = 68.0  # ~24mm
BODY_FONT_SIZE: Final[float] = 9.0
LINE_HEIGHT_FACTOR: Final[float] = 1.4
SECTION_MIN_SPACE: Final[float] = 20.0  # page break before labels/separators below this

# PDF fonts: Noto Sans from pymupdf-fonts (base-14 Helvetica lacks „ “ – € …)
FONT_REGULAR: Final[str] = "notos"
FONT_BOLD: Final[str] = "notosbo"
FONT_ITALIC: Final[str] = "notosit"

# PDF palette
COLOR_ACCENT: Final[RGB] = (0x63 / 255, 0x66 / 255, 0xF1 / 255)
COLOR_BLACK: Final[RGB] = (0x21 / 255, 0x25 / 255, 0x29 / 255)
COLOR_GRAY: Final[RGB] = (0x8C / 255, 0x8C / 255, 0x96 / 255)
COLOR_RED: Final[RGB] = (0xDC / 255, 0x26 / 255, 0x26 / 255)
COLOR_GREEN: Final[RGB] = (0x16 / 255, 0xA3 / 255, 0x4A / 255)
COLOR_SEPARATOR: Final[RGB] = (0xDC / 255, 0xDC / 255, 0xE1 / 255)
