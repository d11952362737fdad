"""Exceptions raised by the integration auditor."""


class AuditError(Exception):
    """Base class for audit failures."""


class PatternError(AuditError):
    """A catcher definition carries an invalid regular expression."""


class ExportError(AuditError):
    """The report writer failed to produce its artifacts."""
