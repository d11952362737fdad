"""Turn match records into sorted report rows."""

import re
from pathlib import PurePosixPath
from typing import Iterable, Sequence

from .matcher import MatchRecord
from .models import ReportRow

NAMESPACE_SEPARATOR = "__"
DEFAULT_NAMESPACE = "Custom"

VALUE_SEPARATOR = " | "
GROUP_SEPARATOR = " || "

# (row attribute, descending)
DEFAULT_SORT_KEYS: tuple[tuple[str, bool], ...] = (
    ("type", False),
    ("sub_type", False),
    ("file_name", False),
    ("matches", True),
)

_NEWLINE_RE = re.compile(r"\r\n|\n|\r")
_WHITESPACE_RE = re.compile(r"\s+")


def derive_namespace(file_name: str) -> str:
    """Return the ``prefix`` of ``prefix__Name.cls``, or 'Custom'."""
    base_name = PurePosixPath(file_name).name
    if NAMESPACE_SEPARATOR in base_name:
        return base_name.split(NAMESPACE_SEPARATOR, 1)[0]
    return DEFAULT_NAMESPACE


def normalize_capture(text: str) -> str:
    """Drop line breaks, then collapse whitespace runs to one space."""
    return _WHITESPACE_RE.sub(" ", _NEWLINE_RE.sub("", text))


def format_detail(record: MatchRecord) -> str:
    """Render captures as ``name: a | b || other: c``."""
    return GROUP_SEPARATOR.join(
        f"{name}: " + VALUE_SEPARATOR.join(normalize_capture(v) for v in values)
        for name, values in record.detail_captures
    )


def to_row(record: MatchRecord) -> ReportRow:
    return ReportRow(
        type=record.category,
        sub_type=record.sub_category,
        file_name=record.file_name,
        name_space=derive_namespace(record.file_name),
        matches=record.match_count,
        detail=format_detail(record),
    )


def to_rows(records: Iterable[MatchRecord]) -> list[ReportRow]:
    return [to_row(record) for record in records]


def sort_rows(
    rows: Sequence[ReportRow],
    keys: Sequence[tuple[str, bool]] = DEFAULT_SORT_KEYS,
) -> list[ReportRow]:
    """
    Stable sort on several keys, each with its own direction.

    Sorts from the least significant key to the most significant one;
    Python's sort is stable, so ties keep the order of earlier passes and,
    in the end, the input order.
    """
    result = list(rows)
    for attribute, descending in reversed(keys):
        result.sort(key=lambda row: getattr(row, attribute), reverse=descending)
    return result
