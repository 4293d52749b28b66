"""PDF reading: raw bytes for the model, page count for the record.

No text is extracted here; the document is sent to the model as-is.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pymupdf

from dirty_data.errors import InputParseError

logger = logging.getLogger(__name__)


def read_pdf(path: Path) -> tuple[bytes, int]:
    """Return the bytes of *path* and its page count.

    Raises:
        InputParseError: If pymupdf cannot open the file as a PDF.
    """
    data = path.read_bytes()
    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
        page_count = len(doc)
        doc.close()
    except Exception as exc:
        raise InputParseError(f"Could not open PDF {path.name}: {exc}") from exc
    if page_count == 0:
        raise InputParseError(f"PDF {path.name} has no pages")

    logger.debug("Read PDF %s: %d pages, %d bytes", path.name, page_count, len(data))
    return data, page_count
