"""Runtime settings read from the environment."""

import os

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class AuditSettings(BaseModel):
    """Settings shared by the HTTP, sandbox and CLI entrypoints."""

    report_dir: str = Field(default="audit-report", description="Directory for report files")
    report_name: str = Field(default="audit-callincallout", description="Report file base name")
    max_workers: int = Field(default=4, ge=1, description="Files matched in parallel")
    excluded_marker: str = Field(default="hidden", description="Skip files starting with this")
    test_marker: str = Field(default="@isTest", description="Skip files containing this")
    write_xlsx: bool = Field(default=True, description="Also write an XLSX report")

    @classmethod
    def from_env(cls) -> "AuditSettings":
        """Build settings from AUDIT_* environment variables."""
        values: dict = {}
        if report_dir := os.environ.get("AUDIT_REPORT_DIR"):
            values["report_dir"] = report_dir
        if max_workers := os.environ.get("AUDIT_MAX_WORKERS"):
            values["max_workers"] = int(max_workers)
        if excluded_marker := os.environ.get("AUDIT_EXCLUDED_MARKER"):
            values["excluded_marker"] = excluded_marker
        if test_marker := os.environ.get("AUDIT_TEST_MARKER"):
            values["test_marker"] = test_marker
        if write_xlsx := os.environ.get("AUDIT_WRITE_XLSX"):
            values["write_xlsx"] = write_xlsx.strip().lower() in _TRUTHY
        return cls(**values)
