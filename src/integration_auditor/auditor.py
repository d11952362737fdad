"""Audit pipeline: scan, match, aggregate, sort, report."""

import logging
import threading
from pathlib import Path
from typing import Sequence

from rich.console import Console

from .aggregator import sort_rows, to_rows
from .catchers import DEFAULT_CATCHERS, Catcher, load_catchers
from .config import AuditSettings
from .errors import ExportError
from .matcher import match_files
from .models import AuditRequest, AuditResult, ReportFile
from .reporter import REPORT_COLUMNS, export_reports, render_table
from .scanner import discover_files
from .writers import FileReportWriter, ReportWriter

logger = logging.getLogger(__name__)

OUTPUT_STRING = "Processed callIns and callOuts audit"

PACKAGE_LOGGER = "integration_auditor"


def resolve_catchers(request: AuditRequest) -> tuple[Catcher, ...]:
    """Compile request catchers, falling back to the built-in registry.

    Raises:
        PatternError: If a supplied pattern is invalid
    """
    if request.catchers:
        return load_catchers(request.catchers)
    return DEFAULT_CATCHERS


def run_audit(
    request: AuditRequest,
    settings: AuditSettings | None = None,
    catchers: Sequence[Catcher] | None = None,
    writer: ReportWriter | None = None,
    cancel_event: threading.Event | None = None,
    console: Console | None = None,
) -> AuditResult:
    """
    Audit a project tree for integration call sites.

    Args:
        request: What to scan and how
        settings: Runtime settings; read from the environment when None
        catchers: Catcher registry; resolved from the request when None
        writer: Report writer; a FileReportWriter under settings.report_dir when None
        cancel_event: Set it to stop between files and keep partial results
        console: Where to print the summary table; no table when None

    Raises:
        PatternError: If request catchers are invalid (before any file is read)
        ValueError: If the path is not a directory
    """
    settings = settings or AuditSettings.from_env()
    if catchers is None:
        catchers = resolve_catchers(request)

    root = Path(request.path)
    if not root.is_dir():
        raise ValueError(f"Path is not a directory: {request.path}")

    # Debug logging is scoped to this run; the HTTP app serves many requests
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    previous_level = package_logger.level
    if request.debug:
        package_logger.setLevel(logging.DEBUG)
    try:
        return _run_pipeline(request, settings, catchers, root, writer, cancel_event, console)
    finally:
        package_logger.setLevel(previous_level)


def _run_pipeline(
    request: AuditRequest,
    settings: AuditSettings,
    catchers: Sequence[Catcher],
    root: Path,
    writer: ReportWriter | None,
    cancel_event: threading.Event | None,
    console: Console | None,
) -> AuditResult:
    files = discover_files(root, request.glob_pattern, request.ignore_patterns)
    logger.info(f"Browsing {len(files)} files")

    outcome = match_files(
        catchers,
        root,
        files,
        max_workers=settings.max_workers,
        excluded_marker=settings.excluded_marker,
        test_marker=settings.test_marker,
        cancel_event=cancel_event,
    )
    if outcome.cancelled:
        logger.warning("Audit cancelled, returning partial results")

    rows = sort_rows(to_rows(outcome.records))

    if console is not None:
        render_table(rows, console)

    report_files: list[ReportFile] = []
    export_error = None
    if request.write_reports:
        if writer is None:
            writer = FileReportWriter(
                Path(settings.report_dir),
                settings.report_name,
                write_xlsx=settings.write_xlsx,
            )
        try:
            report_files = export_reports(rows, REPORT_COLUMNS, writer)
        except ExportError as e:
            export_error = str(e)

    return AuditResult(
        output_string=OUTPUT_STRING,
        result=rows,
        report_files=report_files,
        files_scanned=len(files),
        skipped_files=outcome.skipped,
        cancelled=outcome.cancelled,
        export_error=export_error,
    )
