"""Catcher evaluation over file contents."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import NamedTuple, Sequence

from .catchers import VALUE_GROUP, Catcher
from .models import SkippedFile
from .scanner import is_excluded, read_source

logger = logging.getLogger(__name__)


class MatchRecord(NamedTuple):
    """Matches of one catcher in one file."""

    category: str
    sub_category: str
    file_name: str
    match_count: int
    # (detail name, captures in text order), in the catcher's declaration order
    detail_captures: tuple[tuple[str, tuple[str, ...]], ...]


class MatchOutcome(NamedTuple):
    """Records produced for a set of files."""

    records: list[MatchRecord]
    skipped: list[SkippedFile]
    cancelled: bool


def count_matches(catcher: Catcher, text: str) -> int:
    """Count non-overlapping primary pattern matches."""
    return sum(1 for _ in catcher.regex.finditer(text))


def extract_details(catcher: Catcher, text: str) -> tuple[tuple[str, tuple[str, ...]], ...]:
    """Collect every ``value`` capture of each detail extractor over the whole text."""
    captures = []
    for extractor in catcher.details:
        values = tuple(
            m.group(VALUE_GROUP)
            for m in extractor.regex.finditer(text)
            if m.group(VALUE_GROUP) is not None
        )
        captures.append((extractor.name, values))
    return tuple(captures)


def match_file(catchers: Sequence[Catcher], file_name: str, text: str) -> list[MatchRecord]:
    """
    Evaluate every catcher against one file.

    Args:
        catchers: Validated catcher registry
        file_name: Identifier of the file in the results
        text: Full file content

    Returns:
        One MatchRecord per catcher with at least one primary match
    """
    records = []
    for catcher in catchers:
        count = count_matches(catcher, text)
        if count == 0:
            continue
        record = MatchRecord(
            category=catcher.category,
            sub_category=catcher.sub_category,
            file_name=file_name,
            match_count=count,
            detail_captures=extract_details(catcher, text),
        )
        logger.debug(
            f"[{record.category}/{record.sub_category}] {file_name}: "
            f"{count} match(es), details={dict(record.detail_captures)}"
        )
        records.append(record)
    return records


def _scan_one(
    catchers: Sequence[Catcher],
    root: Path,
    file_name: str,
    excluded_marker: str,
    test_marker: str,
) -> list[MatchRecord]:
    text = read_source(root / file_name)
    if is_excluded(text, excluded_marker, test_marker):
        logger.debug(f"Skipping excluded file {file_name}")
        return []
    return match_file(catchers, file_name, text)


def match_files(
    catchers: Sequence[Catcher],
    root: str | Path,
    files: Sequence[str],
    max_workers: int = 4,
    excluded_marker: str = "hidden",
    test_marker: str = "@isTest",
    cancel_event: threading.Event | None = None,
) -> MatchOutcome:
    """
    Match catchers against files, in parallel when max_workers > 1.

    Unreadable files are reported in ``skipped`` and do not stop the scan.
    Setting ``cancel_event`` abandons the files not started yet; the records
    gathered so far are returned with ``cancelled=True``.
    """
    root = Path(root)
    cancelled = threading.Event()

    def work(file_name: str) -> list[MatchRecord] | None:
        if cancel_event is not None and cancel_event.is_set():
            cancelled.set()
            return None
        return _scan_one(catchers, root, file_name, excluded_marker, test_marker)

    records: list[MatchRecord] = []
    skipped: list[SkippedFile] = []

    def collect(file_name: str, outcome) -> None:
        try:
            file_records = outcome()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {file_name}: {e}")
            skipped.append(SkippedFile(file_name=file_name, reason=str(e)))
            return
        if file_records:
            records.extend(file_records)

    if max_workers <= 1 or len(files) < 2:
        for file_name in files:
            collect(file_name, lambda f=file_name: work(f))
            if cancelled.is_set():
                break
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(work, file_name) for file_name in files]
            # Input order, so worker scheduling never shows in the results
            for file_name, future in zip(files, futures):
                collect(file_name, future.result)

    return MatchOutcome(records=records, skipped=skipped, cancelled=cancelled.is_set())
