"""Audit source trees for inbound and outbound integration call sites."""

from .auditor import run_audit
from .catchers import DEFAULT_CATCHERS, Catcher, DetailExtractor, build_catcher
from .errors import AuditError, ExportError, PatternError

__all__ = [
    "run_audit",
    "DEFAULT_CATCHERS",
    "Catcher",
    "DetailExtractor",
    "build_catcher",
    "AuditError",
    "ExportError",
    "PatternError",
]
