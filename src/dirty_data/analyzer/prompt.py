"""Prompt templates and user-message builders for both analysis passes.

System prompts live as text files under ``analyzer/prompts/`` and are
loaded with a short content hash so log lines record exactly which prompt
version produced a result. User messages are built from the input type:
tabular input is rendered through the sampler, documents are attached as a
base64 ``document`` block.
"""

from __future__ import annotations

import hashlib
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from dirty_data.analyzer.sampler import sample_table
from dirty_data.analyzer.schemas import PrimaryFinding
from dirty_data.analyzer.types import AnalysisInput, DocumentInput

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"

PRIMARY_PROMPT = "anderson"
REVIEW_PROMPT = "rybo"


@lru_cache(maxsize=None)
def load_prompt_template(name: str) -> tuple[str, str]:
    """Load a system prompt by name and compute its version hash.

    Args:
        name: Template name without extension (e.g. ``"anderson"``).

    Returns:
        Tuple of (template_content, version_hash) where version_hash is
        the first 12 hex characters of the SHA-256 digest.

    Raises:
        FileNotFoundError: If the template file does not exist.
    """
    template_path = PROMPTS_DIR / f"{name}.txt"
    if not template_path.exists():
        msg = f"Prompt template not found: {template_path}"
        raise FileNotFoundError(msg)

    content = template_path.read_text(encoding="utf-8").strip()
    version_hash = hashlib.sha256(content.encode("utf-8")).hexdigest()[:12]
    logger.info(
        "Loaded prompt template: %s (version %s, %d chars)",
        template_path.name,
        version_hash,
        len(content),
    )
    return content, version_hash


def build_primary_message(
    analysis_input: AnalysisInput, file_name: str, row_cap: int
) -> dict[str, Any]:
    """Build the single user message for the primary pass.

    Args:
        analysis_input: Sheet or document being analyzed.
        file_name: Original upload name, quoted in the framing instruction.
        row_cap: Maximum data rows rendered into the prompt.

    Returns:
        A ``{"role": "user", "content": ...}`` message. Content is plain
        text for sheets and a list of content blocks for documents.
    """
    if isinstance(analysis_input, DocumentInput):
        return {
            "role": "user",
            "content": [
                {
                    "type": "document",
                    "source": {
                        "type": "base64",
                        "media_type": analysis_input.media_type,
                        "data": analysis_input.base64_data,
                    },
                },
                {
                    "type": "text",
                    "text": f'Analyze this PDF document "{file_name}".',
                },
            ],
        }

    digest = sample_table(analysis_input, row_cap)
    note = f"\n{digest.truncation_note}" if digest.truncated else ""
    content = (
        f'Analyze this spreadsheet "{file_name}".\n\n'
        f"FILE INFO:\n"
        f"- Total rows: {digest.total_rows}\n"
        f"- Total columns: {digest.total_cols}\n"
        f"- Headers: {digest.header_line}{note}\n\n"
        f"DATA (first {row_cap} rows):\n"
        f"{digest.rows_text}"
    )
    return {"role": "user", "content": content}


def build_review_message(
    primary: PrimaryFinding,
    analysis_input: AnalysisInput,
    file_name: str,
    row_cap: int,
) -> dict[str, Any]:
    """Build the user message for the review pass.

    Embeds the primary finding as indented JSON. Sheets get a smaller
    sample than the primary pass; documents are not re-sent, the reviewer
    works from the primary summary instead.
    """
    primary_json = primary.model_dump_json(indent=2)

    if isinstance(analysis_input, DocumentInput):
        content = (
            f"ANDERSON'S ANALYSIS:\n{primary_json}\n\n"
            f'ORIGINAL FILE: "{file_name}" (PDF document -- you don\'t have the '
            f"raw content, but use Anderson's analysis and summary as context)"
            f"\n\nGive me your take."
        )
        return {"role": "user", "content": content}

    digest = sample_table(analysis_input, row_cap)
    note = f"\n- {digest.truncation_note}" if digest.truncated else ""
    content = (
        f"ANDERSON'S ANALYSIS:\n{primary_json}\n\n"
        f'ORIGINAL DATA from "{file_name}":\n'
        f"- {digest.total_rows} rows, {digest.total_cols} columns\n"
        f"- Headers: {digest.header_line}{note}\n"
        f"- Sample (first {row_cap} rows):\n"
        f"{digest.rows_text}\n\n"
        f"Give me your take."
    )
    return {"role": "user", "content": content}
