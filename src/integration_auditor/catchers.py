"""Catcher definitions for integration call sites.

A catcher pairs a primary regex, whose match count flags a file, with
named detail extractors that pull context (endpoint, resource name, ...)
out of the same file text.

Detail regexes must expose their captured text through a ``value`` named
group. The registry is validated once when it is built, so a malformed
pattern stops the audit before any file is read.
"""

import re
from typing import Iterable, NamedTuple

from .errors import PatternError
from .models import CatcherDefinition

# Flags used for the primary pattern (count of occurrences in the file)
PRIMARY_FLAGS = re.IGNORECASE | re.MULTILINE

# Detail patterns may span lines (e.g. a multi-line setEndpoint call)
DETAIL_FLAGS = re.IGNORECASE | re.MULTILINE | re.DOTALL

VALUE_GROUP = "value"


class DetailExtractor(NamedTuple):
    """A named secondary pattern extracting context from a flagged file."""

    name: str
    regex: re.Pattern


class Catcher(NamedTuple):
    """A primary detection pattern with its detail extractors."""

    category: str
    sub_category: str
    regex: re.Pattern
    details: tuple[DetailExtractor, ...] = ()

    @property
    def detail_names(self) -> tuple[str, ...]:
        return tuple(d.name for d in self.details)


def _compile(pattern: str, flags: int, label: str) -> re.Pattern:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise PatternError(f"Invalid regex for {label}: {pattern!r} ({e})") from e


def build_catcher(
    category: str,
    sub_category: str,
    pattern: str,
    details: Iterable[tuple[str, str]] = (),
) -> Catcher:
    """
    Compile and validate a catcher.

    Args:
        category: Top-level classification (e.g. "INBOUND")
        sub_category: Secondary classification (e.g. "SOAP")
        pattern: Primary regex source
        details: Ordered (name, regex source) pairs

    Raises:
        PatternError: If a regex does not compile, a detail regex has no
            ``value`` group, or a detail name is repeated.
    """
    label = f"{category}/{sub_category}"
    regex = _compile(pattern, PRIMARY_FLAGS, label)

    extractors: list[DetailExtractor] = []
    seen: set[str] = set()
    for name, detail_pattern in details:
        if name in seen:
            raise PatternError(f"Duplicate detail extractor '{name}' in {label}")
        seen.add(name)
        detail_regex = _compile(detail_pattern, DETAIL_FLAGS, f"{label}.{name}")
        if VALUE_GROUP not in detail_regex.groupindex:
            raise PatternError(
                f"Detail extractor '{name}' in {label} must define a "
                f"(?P<{VALUE_GROUP}>...) group: {detail_pattern!r}"
            )
        extractors.append(DetailExtractor(name=name, regex=detail_regex))

    return Catcher(
        category=category,
        sub_category=sub_category,
        regex=regex,
        details=tuple(extractors),
    )


def load_catchers(definitions: Iterable[CatcherDefinition]) -> tuple[Catcher, ...]:
    """Build a registry from request-supplied definitions."""
    return tuple(
        build_catcher(
            d.category,
            d.sub_category,
            d.pattern,
            [(detail.name, detail.pattern) for detail in d.details],
        )
        for d in definitions
    )


# Apex integration call sites
DEFAULT_CATCHERS: tuple[Catcher, ...] = (
    build_catcher(
        "INBOUND",
        "SOAP",
        r"webservice static",
        [("webServiceName", r"webservice static (?P<value>.*?){")],
    ),
    build_catcher(
        "INBOUND",
        "REST",
        r"@RestResource",
        [("restResource", r"@RestResource\((?P<value>.*?)\)")],
    ),
    build_catcher(
        "OUTBOUND",
        "HTTP",
        r"new HttpRequest",
        [
            ("endPoint", r"setEndpoint\((?P<value>.*?);"),
            ("action", r"<soapenv:Body><[A-Za-z0-9_-]*:(?P<value>.*?)>"),
        ],
    ),
)
