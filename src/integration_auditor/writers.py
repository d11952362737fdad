"""Report writers producing CSV and XLSX artifacts."""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol, Sequence

import pandas as pd

from .models import ColumnSpec, ReportFile, ReportRow

logger = logging.getLogger(__name__)

SHEET_NAME = "Audit"


class ReportWriter(Protocol):
    """Anything able to persist report rows."""

    def write(self, rows: Sequence[ReportRow], columns: Sequence[ColumnSpec]) -> list[ReportFile]:
        ...


def rows_to_frame(rows: Sequence[ReportRow], columns: Sequence[ColumnSpec]) -> pd.DataFrame:
    """Project rows onto the column spec, with headers as column names."""
    keys = [c.key for c in columns]
    frame = pd.DataFrame([row.model_dump() for row in rows], columns=keys)
    return frame.rename(columns={c.key: c.header for c in columns})


class FileReportWriter:
    """Writes ``<base_name>-<timestamp>-<id>.csv`` (and ``.xlsx``) into a directory."""

    def __init__(self, report_dir: str | Path, base_name: str, write_xlsx: bool = True):
        self.report_dir = Path(report_dir)
        self.base_name = base_name
        self.write_xlsx = write_xlsx

    def _stem(self) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
        # Unique per run so concurrent audits never share a path
        return f"{self.base_name}-{timestamp}-{uuid.uuid4().hex[:8]}"

    def write(self, rows: Sequence[ReportRow], columns: Sequence[ColumnSpec]) -> list[ReportFile]:
        self.report_dir.mkdir(parents=True, exist_ok=True)
        frame = rows_to_frame(rows, columns)
        stem = self._stem()

        csv_path = self.report_dir / f"{stem}.csv"
        frame.to_csv(csv_path, index=False)
        logger.info(f"Generated CSV report: {csv_path}")
        files = [ReportFile(path=str(csv_path), format="csv")]

        if self.write_xlsx:
            xlsx_path = self.report_dir / f"{stem}.xlsx"
            with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
                frame.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            logger.info(f"Generated XLSX report: {xlsx_path}")
            files.append(ReportFile(path=str(xlsx_path), format="xlsx"))

        return files
