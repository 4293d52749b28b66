"""Command-line entry point.

Startup sequence:
    1. Load pipeline configuration (needed for log_dir and db_path)
    2. Setup logging (must happen before any code that logs)
    3. Load analysis configuration
    4. Initialize database (engine, tables, session factory)
    5. Run the requested command

Commands:
    analyze FILE [--no-save]    Analyze a spreadsheet or PDF and print the report
    history [--limit N]         List saved analyses
    delete ID                   Delete a saved analysis
    serve [--host H --port P]   Run the HTTP API
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dirty_data.analyzer import DualPassAnalyzer
from dirty_data.analyzer.client import AnthropicModelClient
from dirty_data.config import AnalysisSettings, PipelineSettings
from dirty_data.db import get_engine, get_session_factory, init_db
from dirty_data.errors import DirtyDataError
from dirty_data.logging import setup_logging
from dirty_data.report import format_size, format_timestamp, render_report
from dirty_data.service import AnalysisService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirty-data",
        description="The down & dirty on your data: two-pass LLM review of sheets and PDFs.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_analyze = sub.add_parser("analyze", help="Analyze a .xlsx/.xls/.csv/.tsv/.pdf file")
    p_analyze.add_argument("file", type=Path)
    p_analyze.add_argument("--no-save", action="store_true", help="Do not save to history")

    p_history = sub.add_parser("history", help="List saved analyses")
    p_history.add_argument("--limit", type=int, default=None)

    p_delete = sub.add_parser("delete", help="Delete a saved analysis")
    p_delete.add_argument("id", type=int)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    return parser


def _build_service(
    analysis: AnalysisSettings, pipeline: PipelineSettings, session_factory
) -> AnalysisService:
    client = AnthropicModelClient.from_settings(analysis)
    return AnalysisService(DualPassAnalyzer(client, analysis), session_factory, pipeline)


def _cmd_analyze(args, service: AnalysisService) -> int:
    upload, run = service.analyze_file(args.file, save=not args.no_save)
    print(
        render_report(
            run.result,
            file_name=upload.file_name,
            file_type=upload.file_type,
            file_size=format_size(upload.size_bytes),
            row_count=upload.row_count,
            col_count=upload.col_count,
            truncated=upload.truncated,
        )
    )
    if run.record_id is not None:
        print(f"Saved as analysis #{run.record_id}")
    elif run.save_error:
        print(f"Warning: analysis not saved ({run.save_error})")
    return 0


def _cmd_history(args, service: AnalysisService) -> int:
    records = service.history(args.limit)
    if not records:
        print("No saved analyses.")
        return 0
    for record in records:
        when = format_timestamp(record.created_at) if record.created_at else "?"
        print(
            f"#{record.id:<5} {record.file_type.upper():<5} {record.file_name}  "
            f"({record.row_count} rows, v{record.version})  {when}"
        )
    return 0


def _cmd_delete(args, service: AnalysisService) -> int:
    if service.delete(args.id):
        print(f"Deleted analysis #{args.id}")
        return 0
    print(f"Analysis #{args.id} not found")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Run the Dirty Data analyzer CLI."""
    args = build_parser().parse_args(argv)

    # 1. Load pipeline config first -- needed for logging and database paths
    pipeline = PipelineSettings()

    # 2. Setup logging BEFORE anything else logs
    setup_logging(
        log_dir=pipeline.log_dir,
        max_bytes=pipeline.log_max_bytes,
        backup_count=pipeline.log_backup_count,
    )

    # 3. Load analysis config (never log the API key)
    analysis = AnalysisSettings()
    logger.info(
        "Config loaded -- analysis: model=%s, row caps=%d/%d, max_tokens=%d/%d",
        analysis.model,
        analysis.primary_row_cap,
        analysis.review_row_cap,
        analysis.primary_max_tokens,
        analysis.review_max_tokens,
    )

    # 4. Initialize database
    engine = get_engine(pipeline.db_path)
    init_db(engine)
    session_factory = get_session_factory(engine)
    logger.info("Database initialized at %s", pipeline.db_path)

    try:
        if args.command == "serve":
            import uvicorn

            from dirty_data.api import create_app

            service = _build_service(analysis, pipeline, session_factory)
            uvicorn.run(create_app(service), host=args.host, port=args.port)
            return 0

        if args.command == "analyze":
            service = _build_service(analysis, pipeline, session_factory)
            return _cmd_analyze(args, service)

        # History commands never call the model, so no client is needed
        service = AnalysisService(None, session_factory, pipeline)
        if args.command == "history":
            return _cmd_history(args, service)
        return _cmd_delete(args, service)

    except DirtyDataError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}")
        return 1
    finally:
        engine.dispose()
