"""Pydantic models for the integration auditor."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class DetailDefinition(BaseModel):
    """A detail extractor supplied as plain text."""

    name: str = Field(description="Detail name shown in the report (e.g., 'endPoint')")
    pattern: str = Field(description="Regex with a (?P<value>...) group holding the extracted text")


class CatcherDefinition(BaseModel):
    """A catcher supplied as plain text, compiled before the scan starts."""

    category: str = Field(description="Top-level classification (e.g., 'INBOUND', 'OUTBOUND')")
    sub_category: str = Field(description="Secondary classification (e.g., 'SOAP', 'REST', 'HTTP')")
    pattern: str = Field(description="Primary regex; one report row per file with at least one match")
    details: list[DetailDefinition] = Field(default_factory=list)


class AuditRequest(BaseModel):
    """Request body for auditing a project tree."""

    path: str = Field(default=".", description="Root directory of the project to audit")
    glob_pattern: str = Field(
        default="**/*.{cls,trigger}",
        description="Glob selecting the files to scan, relative to path",
    )
    ignore_patterns: Optional[list[str]] = Field(
        default=None,
        description="Globs to exclude; defaults to the standard tool directories",
    )
    catchers: Optional[list[CatcherDefinition]] = Field(
        default=None,
        description="Custom catchers replacing the built-in integration catchers",
    )
    debug: bool = Field(default=False, description="Log every match record")
    write_reports: bool = Field(default=True, description="Write CSV/XLSX report files")


class ReportRow(BaseModel):
    """One flattened audit result row."""

    type: str = Field(description="Catcher category (e.g., 'INBOUND')")
    sub_type: str = Field(description="Catcher sub-category (e.g., 'REST')")
    file_name: str = Field(description="File path relative to the audited root")
    name_space: str = Field(description="Namespace prefix of the file, or 'Custom'")
    matches: int = Field(description="Number of primary pattern matches in the file")
    detail: str = Field(default="", description="Extracted details, 'name: a | b || name2: c'")


class ColumnSpec(BaseModel):
    """A report column: row attribute and its display header."""

    key: str
    header: str


class ReportFile(BaseModel):
    """A generated report artifact."""

    path: str
    format: Literal["csv", "xlsx"]


class SkippedFile(BaseModel):
    """A file left out of the results, with the reason."""

    file_name: str
    reason: str


class AuditResult(BaseModel):
    """Response from an audit run."""

    output_string: str = Field(description="Human-readable summary")
    result: list[ReportRow] = Field(default_factory=list, description="Sorted report rows")
    report_files: list[ReportFile] = Field(default_factory=list)
    files_scanned: int = Field(default=0, description="Number of files matching the glob")
    skipped_files: list[SkippedFile] = Field(
        default_factory=list, description="Files that could not be read"
    )
    cancelled: bool = Field(default=False, description="Whether the scan stopped early")
    export_error: Optional[str] = Field(
        default=None, description="Report writer failure; rows are still returned"
    )
