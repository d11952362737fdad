"""Console table and report export for audit rows."""

import logging
from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .errors import ExportError
from .models import ColumnSpec, ReportFile, ReportRow
from .writers import ReportWriter

logger = logging.getLogger(__name__)

REPORT_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec(key="type", header="IN/OUT"),
    ColumnSpec(key="sub_type", header="Protocol"),
    ColumnSpec(key="file_name", header="Apex"),
    ColumnSpec(key="name_space", header="Namespace"),
    ColumnSpec(key="matches", header="Number"),
    ColumnSpec(key="detail", header="Detail"),
)

# The free-text detail column would make the console view unreadable
TABLE_EXCLUDED_KEYS = frozenset({"detail"})


def table_columns(columns: Sequence[ColumnSpec] = REPORT_COLUMNS) -> list[ColumnSpec]:
    return [c for c in columns if c.key not in TABLE_EXCLUDED_KEYS]


def build_table(rows: Sequence[ReportRow], columns: Sequence[ColumnSpec] = REPORT_COLUMNS) -> Table:
    shown = table_columns(columns)
    table = Table(title=f"Call-ins and call-outs ({len(rows)})")
    for column in shown:
        table.add_column(Text(column.header), justify="right" if column.key == "matches" else "left")
    for row in rows:
        # Cell values are plain text, never markup
        table.add_row(*(Text(str(getattr(row, c.key))) for c in shown))
    return table


def render_table(rows: Sequence[ReportRow], console: Console | None = None) -> None:
    """Print the summary columns of the rows."""
    (console or Console()).print(build_table(rows))


def export_reports(
    rows: Sequence[ReportRow],
    columns: Sequence[ColumnSpec],
    writer: ReportWriter,
) -> list[ReportFile]:
    """
    Hand the full rows and column spec to a report writer.

    Raises:
        ExportError: If the writer fails
    """
    try:
        return writer.write(list(rows), list(columns))
    except Exception as e:
        logger.error(f"Report generation failed: {e}")
        raise ExportError(f"Report generation failed: {e}") from e
