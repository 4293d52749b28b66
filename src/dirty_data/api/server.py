"""FastAPI server: analyze uploads and browse the analysis history.

Endpoints:
    POST   /api/analyze          -- run both passes on a sheet or PDF payload
    GET    /api/analyses         -- saved analyses, newest first
    DELETE /api/analyses/{id}    -- remove a saved analysis
    GET    /health

Errors are returned as ``{"error": message}``. A failed primary pass never
returns a partial body.

Build with create_app(service); see ``dirty_data.cli`` for the uvicorn entry.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Literal

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from dirty_data.analyzer.types import DocumentInput, TabularInput
from dirty_data.errors import MalformedResponseError, PersistenceError, UpstreamError
from dirty_data.report import format_size
from dirty_data.service import AnalysisService

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------

class TabularPayload(BaseModel):
    """Sheet contents as parsed by the client."""

    headers: list[Any] = Field(default_factory=list)
    rows: list[list[Any]] = Field(default_factory=list)
    totalRows: int | None = None
    totalCols: int | None = None
    truncated: bool | None = None

    def to_input(self) -> TabularInput:
        return TabularInput.from_lists(
            self.headers,
            self.rows,
            total_rows=self.totalRows,
            total_cols=self.totalCols,
            truncated=self.truncated,
        )


class DocumentPayload(BaseModel):
    """A PDF as base64."""

    base64: str


class AnalyzeRequest(BaseModel):
    """POST /api/analyze body."""

    type: Literal["pdf", "spreadsheet"]
    fileName: str
    data: dict[str, Any]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _file_type_for(file_name: str, request_type: str) -> str:
    if request_type == "pdf":
        return "pdf"
    lowered = file_name.lower()
    return "csv" if lowered.endswith((".csv", ".tsv")) else "xlsx"


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------

def create_app(service: AnalysisService) -> FastAPI:
    """Build the ASGI app around an already-configured AnalysisService."""
    app = FastAPI(title="Dirty Data Analyzer")
    app.state.service = service

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "bad body") if errors else "bad body"
        return _error(400, f"Invalid request: {detail}")

    @app.post("/api/analyze")
    def analyze(body: AnalyzeRequest) -> JSONResponse:
        file_size = None
        try:
            if body.type == "pdf":
                payload = DocumentPayload.model_validate(body.data)
                data = base64.b64decode(payload.base64, validate=True)
                analysis_input: DocumentInput | TabularInput = DocumentInput(data=data)
                file_size = format_size(len(data))
            else:
                analysis_input = TabularPayload.model_validate(body.data).to_input()
        except (ValidationError, binascii.Error) as exc:
            logger.info("Rejected malformed %s payload for %s", body.type, body.fileName)
            return _error(400, f"Invalid {body.type} payload: {exc}")

        row_count = col_count = 0
        if isinstance(analysis_input, TabularInput):
            row_count = analysis_input.total_rows
            col_count = analysis_input.total_cols

        try:
            run = service.analyze(
                analysis_input,
                file_name=body.fileName,
                file_type=_file_type_for(body.fileName, body.type),
                file_size=file_size,
                row_count=row_count,
                col_count=col_count,
            )
        except UpstreamError as exc:
            logger.error("Analysis error for %s: %s", body.fileName, exc)
            return _error(502, str(exc) or "Analysis failed")
        except MalformedResponseError as exc:
            logger.error("Analysis error for %s: %s", body.fileName, exc)
            return _error(500, "Analysis failed: model returned an unreadable response")
        except Exception:
            logger.exception("Unexpected analysis error for %s", body.fileName)
            return _error(500, "Analysis failed")

        content = run.result.to_response()
        content["id"] = run.record_id
        return JSONResponse(content=content)

    @app.get("/api/analyses")
    def list_history(limit: int | None = None) -> list[dict[str, Any]]:
        return [record.to_dict() for record in service.history(limit)]

    @app.delete("/api/analyses/{analysis_id}")
    def delete_history_item(analysis_id: int) -> JSONResponse:
        try:
            deleted = service.delete(analysis_id)
        except PersistenceError as exc:
            logger.error("Delete of analysis %d failed: %s", analysis_id, exc)
            return _error(500, "Failed to delete analysis")
        if not deleted:
            return _error(404, f"Analysis {analysis_id} not found")
        return JSONResponse(content={"deleted": analysis_id})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
