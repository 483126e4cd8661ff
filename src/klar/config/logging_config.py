"""
Loguru setup for Klar.

Request handlers bind ``correlation_id`` with ``logger.contextualize``;
the text format shows it, JSON output carries it in ``record.extra``.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

TEXT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[correlation_id]} | {name}:{line} | {message}"
)

# Libraries whose loguru output is only noise here
QUIET_MODULES = ("httpx", "httpcore", "fitz")


def setup_structured_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    serialize: bool = False,
) -> None:
    """
    Replace Loguru's default handler.

    Args:
        level: Minimum level on stdout
        log_file: Optional JSON log file, rotated at 10 MB
        serialize: JSON lines on stdout instead of text
    """
    logger.remove()
    logger.configure(extra={"correlation_id": "-"})

    logger.add(sys.stdout, level=level, format=TEXT_FORMAT, serialize=serialize, diagnose=False)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level="DEBUG",
            serialize=True,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
        )

    for module in QUIET_MODULES:
        logger.disable(module)
