"""Shared line scanning for the per-dialect usage extractors."""

import re
from pathlib import Path
from typing import Iterable, Iterator

from ..models import Dialect, FileLocation, VariableUsage


# Canonical env var shape: uppercase letter or underscore, then uppercase,
# digits or underscores. Lowercase/mixed-case identifiers are never reported.
ENV_NAME = r"[A-Z_][A-Z0-9_]*"

ENV_NAME_RE = re.compile(rf"^{ENV_NAME}$")


def is_env_name(name: str) -> bool:
    """Check if a name has the canonical env var shape."""
    return bool(ENV_NAME_RE.match(name))


def iter_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield (line_number, line) pairs, 1-indexed, without line terminators."""
    for i, line in enumerate(content.split("\n"), start=1):
        yield i, line.rstrip("\r")


def scan_lines(
    content: str,
    file_path: str | Path,
    dialect: Dialect,
    patterns: Iterable[re.Pattern],
) -> Iterator[VariableUsage]:
    """Run every pattern over every line and yield one usage per matched name.

    Each pattern must capture the variable name in group 1. When two patterns
    match the same name at the same column (e.g. ``os.getenv`` and a bare
    ``getenv``), only the first is reported.
    """
    patterns = list(patterns)
    display_path = str(file_path)
    seen: set[tuple[int, int, str]] = set()

    for line_num, line in iter_lines(content):
        context = None
        for pattern in patterns:
            for match in pattern.finditer(line):
                name = match.group(1)
                column = match.start(1) + 1
                key = (line_num, column, name)
                if key in seen:
                    continue
                seen.add(key)
                if context is None:
                    context = line.strip()
                yield VariableUsage(
                    name=name,
                    location=FileLocation(file=display_path, line=line_num, column=column),
                    dialect=dialect,
                    context=context,
                )
