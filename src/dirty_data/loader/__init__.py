"""Upload loading: turn a file on disk into an analysis input.

Dispatches on extension. Sheets (``.xlsx``/``.xls``/``.csv``/``.tsv``) are
read with pandas into a header row plus at most ``max_rows`` data rows;
PDFs are read as raw bytes and only opened to count pages. Anything else
is rejected with UnsupportedInputError before the analyzer is involved.

Public API:
    load_upload(path, max_rows=500) -> Upload
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dirty_data.analyzer.types import AnalysisInput, DocumentInput, TabularInput
from dirty_data.errors import UnsupportedInputError
from dirty_data.loader.pdf import read_pdf
from dirty_data.loader.tabular import read_delimited, read_workbook

logger = logging.getLogger(__name__)

__all__ = ["FILE_TYPES", "Upload", "detect_file_type", "load_upload"]

# Extension -> normalized file type stored with each analysis
FILE_TYPES = {
    "xlsx": "xlsx",
    "xls": "xlsx",
    "csv": "csv",
    "tsv": "csv",
    "pdf": "pdf",
}


@dataclass(frozen=True)
class Upload:
    """A loaded upload plus the metadata shown alongside its analysis."""

    file_name: str
    file_type: str
    size_bytes: int
    analysis_input: AnalysisInput
    page_count: int | None = None

    @property
    def row_count(self) -> int:
        if isinstance(self.analysis_input, TabularInput):
            return self.analysis_input.total_rows
        return 0

    @property
    def col_count(self) -> int:
        if isinstance(self.analysis_input, TabularInput):
            return self.analysis_input.total_cols
        return 0

    @property
    def truncated(self) -> bool:
        if isinstance(self.analysis_input, TabularInput):
            return self.analysis_input.truncated
        return False


def detect_file_type(file_name: str) -> str:
    """Map a file name to ``"xlsx"``, ``"csv"``, or ``"pdf"``.

    Raises:
        UnsupportedInputError: For any other extension.
    """
    ext = Path(file_name).suffix.lower().lstrip(".")
    try:
        return FILE_TYPES[ext]
    except KeyError:
        raise UnsupportedInputError(f"Unsupported file type: .{ext}") from None


def load_upload(path: Path, max_rows: int = 500) -> Upload:
    """Load *path* into an Upload ready for analysis.

    Args:
        path: File to load.
        max_rows: Data rows kept from a sheet; the rest only count
                  towards ``total_rows``.

    Raises:
        UnsupportedInputError: Unknown extension.
        InputParseError: The file could not be read.
    """
    path = Path(path)
    file_type = detect_file_type(path.name)
    size_bytes = path.stat().st_size
    ext = path.suffix.lower()

    page_count = None
    if file_type == "pdf":
        data, page_count = read_pdf(path)
        analysis_input: AnalysisInput = DocumentInput(data=data)
    elif file_type == "xlsx":
        analysis_input = read_workbook(path, max_rows)
    else:
        analysis_input = read_delimited(
            path, max_rows, sep="\t" if ext == ".tsv" else ","
        )

    upload = Upload(
        file_name=path.name,
        file_type=file_type,
        size_bytes=size_bytes,
        analysis_input=analysis_input,
        page_count=page_count,
    )
    logger.info(
        "Loaded %s (%s, %d bytes, %d rows x %d cols, truncated=%s)",
        upload.file_name,
        upload.file_type,
        upload.size_bytes,
        upload.row_count,
        upload.col_count,
        upload.truncated,
    )
    return upload
