"""Command-line entrypoint: ``integration-auditor audit``."""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.text import Text

from .auditor import run_audit
from .config import AuditSettings
from .errors import PatternError
from .models import AuditRequest

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="integration-auditor",
        description="Audit a project for inbound and outbound integration call sites",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    audit = subparsers.add_parser("audit", help="Audit call-ins and call-outs")
    audit.add_argument("--path", default=".", help="Project directory (default: current directory)")
    audit.add_argument("-d", "--debug", action="store_true", help="Log every match")
    audit.add_argument("--no-reports", action="store_true", help="Skip CSV/XLSX report files")
    audit.add_argument("--report-dir", help="Directory for report files")
    audit.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    request = AuditRequest(
        path=args.path,
        debug=args.debug,
        write_reports=not args.no_reports,
    )
    console = Console()

    try:
        # Bad AUDIT_* values raise ValueError (pydantic ValidationError included)
        settings = AuditSettings.from_env()
        if args.report_dir:
            settings = settings.model_copy(update={"report_dir": args.report_dir})

        result = run_audit(
            request,
            settings=settings,
            console=None if args.json else console,
        )
    except (PatternError, ValueError) as e:
        logger.error(str(e))
        return 1

    if args.json:
        print(json.dumps(result.model_dump(), indent=2))
        return 0

    for skipped in result.skipped_files:
        console.print(Text(f"Skipped {skipped.file_name}: {skipped.reason}", style="yellow"))
    if result.export_error:
        console.print(Text(result.export_error, style="red"))
    for report in result.report_files:
        console.print(Text(f"Report ({report.format}): {report.path}"))
    console.print(result.output_string)
    return 0


if __name__ == "__main__":
    sys.exit(main())
