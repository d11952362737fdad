"""File discovery and loading for the audit."""

import logging
import os
import re
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_GLOB_PATTERN = "**/*.{cls,trigger}"

# Same defaults as the sfdx project tooling
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "**/node_modules/**",
    "**/.git/**",
    "**/cache/**",
    "**/.npm/**",
    "**/logs/**",
    "**/.sfdx/**",
    "**/.sf/**",
    "**/.vscode/**",
)

# Directories never worth descending into
SKIP_DIRS: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    ".npm",
    ".sfdx",
    ".sf",
    ".vscode",
    "__pycache__",
    ".venv",
    "venv",
})

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives: ``*.{cls,trigger}`` -> ``*.cls``, ``*.trigger``."""
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end():]
    expanded = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def _translate_segment(segment: str) -> str:
    """Regex for one path segment; ``*`` and ``?`` never cross ``/``."""
    out = []
    i = 0
    while i < len(segment):
        ch = segment[i]
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[" and (end := segment.find("]", i + 2)) != -1:
            body = segment[i + 1:end].replace("\\", "\\\\")
            if body.startswith("!"):
                body = "^" + body[1:]
            out.append(f"[{body}]")
            i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern:
    parts = pattern.split("/")
    regex = ""
    for index, part in enumerate(parts):
        last = index == len(parts) - 1
        if part == "**":
            # Zero or more whole directories
            regex += ".*" if last else "(?:.*/)?"
        else:
            regex += _translate_segment(part) + ("" if last else "/")
    return re.compile(regex)


def glob_match(relative_path: str, pattern: str) -> bool:
    """Match a POSIX relative path against a glob.

    ``*`` and ``?`` stay inside one path segment. ``**`` spans any number
    of directories, including none, so ``**/*.cls`` matches ``Foo.cls`` as
    well as ``classes/Foo.cls`` while ``*.cls`` only matches root files.
    """
    return any(
        _compile_glob(candidate).fullmatch(relative_path)
        for candidate in expand_braces(pattern)
    )


def discover_files(
    root: str | Path,
    glob_pattern: str = DEFAULT_GLOB_PATTERN,
    ignore_patterns: tuple[str, ...] | list[str] | None = None,
) -> list[str]:
    """
    List files under root matching a glob, minus ignored paths.

    Args:
        root: Directory to walk
        glob_pattern: Glob relative to root (brace alternatives allowed)
        ignore_patterns: Globs to exclude; DEFAULT_IGNORE_PATTERNS when None

    Returns:
        Sorted relative POSIX paths
    """
    root = Path(root)

    if not root.exists() or not root.is_dir():
        return []

    ignore = DEFAULT_IGNORE_PATTERNS if ignore_patterns is None else tuple(ignore_patterns)
    files = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]

        for file_name in filenames:
            relative = (Path(dirpath) / file_name).relative_to(root).as_posix()
            if not glob_match(relative, glob_pattern):
                continue
            if any(glob_match(relative, pattern) for pattern in ignore):
                logger.debug(f"Ignoring {relative}")
                continue
            files.append(relative)

    return sorted(files)


def read_source(path: str | Path) -> str:
    """Read a source file as UTF-8.

    Raises:
        OSError: If the file cannot be opened
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def is_excluded(
    text: str,
    excluded_marker: str = "hidden",
    test_marker: str = "@isTest",
) -> bool:
    """Check whether a file is generated/hidden or test code."""
    if excluded_marker and text.startswith(excluded_marker):
        return True
    return bool(test_marker) and test_marker in text
