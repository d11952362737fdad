#!/usr/bin/env python3
"""
Sandbox entrypoint for integration-auditor.
Reads audit parameters from stdin JSON, audits the project tree, outputs JSON to stdout.
"""

import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from pydantic import ValidationError

from integration_auditor.auditor import run_audit
from integration_auditor.models import AuditRequest

logging.basicConfig(level=logging.INFO, stream=sys.stderr)
logger = logging.getLogger(__name__)


def main() -> None:
    try:
        input_data = json.load(sys.stdin)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON input: {e}"}))
        sys.exit(1)

    # Support both 'path' and 'directory'
    local_path = input_data.get("path") or input_data.get("directory")
    if not local_path:
        print(
            json.dumps(
                {
                    "error": "Missing required input: 'path' (or 'directory')",
                    "example": {"path": "."},
                }
            )
        )
        sys.exit(1)

    try:
        request = AuditRequest(
            path=local_path,
            glob_pattern=input_data.get("glob_pattern", "**/*.{cls,trigger}"),
            ignore_patterns=input_data.get("ignore_patterns"),
            catchers=input_data.get("catchers"),
            debug=input_data.get("debug", False),
            write_reports=input_data.get("write_reports", True),
        )
    except ValidationError as e:
        print(json.dumps({"error": f"Invalid input: {e}"}))
        sys.exit(1)

    try:
        result = run_audit(request)
        print(json.dumps(result.model_dump()))
    except Exception as e:
        print(json.dumps({"error": str(e)}))
        sys.exit(1)


if __name__ == "__main__":
    main()
