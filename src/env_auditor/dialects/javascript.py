"""JavaScript and TypeScript env var usage extractor.

Detects:
- process.env.VAR and process.env['VAR']
- import.meta.env.VAR (Vite)
- const { VAR1, VAR2: alias, VAR3 = 'x' } = process.env
"""

import re
from pathlib import Path
from typing import Iterator

from ..models import Dialect, FileLocation, VariableUsage
from .common import ENV_NAME, is_env_name, iter_lines, scan_lines


JS_EXTENSIONS = ("js", "mjs", "cjs", "jsx")
TS_EXTENSIONS = ("ts", "mts", "cts", "tsx")

PROCESS_ENV_DOT = re.compile(rf"""process\.env\.({ENV_NAME})""")
PROCESS_ENV_BRACKET = re.compile(rf"""process\.env\[['"]({ENV_NAME})['"]\]""")
IMPORT_META_ENV = re.compile(rf"""import\.meta\.env\.({ENV_NAME})""")

PATTERNS = (PROCESS_ENV_DOT, PROCESS_ENV_BRACKET, IMPORT_META_ENV)

DESTRUCTURE_PROCESS_ENV = re.compile(
    r"""(?:const|let|var)\s*\{\s*([^}]+?)\s*\}\s*=\s*process\.env\b"""
)

_DESTRUCTURE_ENTRY = re.compile(r"[^,]+")


def extract_destructured_names(entries: str) -> list[tuple[str, int]]:
    """Split the inside of ``{ ... }`` into (name, offset) pairs.

    Handles renaming (``VAR: local``) and defaults (``VAR = 'x'``). Entries that
    are not canonical env var names (``...rest``, lowercase keys) are dropped.
    The offset is the 0-based position of the name within ``entries``.
    """
    names = []
    for entry in _DESTRUCTURE_ENTRY.finditer(entries):
        raw = entry.group(0)
        key = re.split(r"[:=]", raw, maxsplit=1)[0]
        name = key.strip()
        if not name or not is_env_name(name):
            continue
        offset = entry.start() + (len(key) - len(key.lstrip()))
        names.append((name, offset))
    return names


def _scan(content: str, file_path: str | Path, dialect: Dialect) -> Iterator[VariableUsage]:
    yield from scan_lines(content, file_path, dialect, PATTERNS)

    display_path = str(file_path)
    for line_num, line in iter_lines(content):
        for match in DESTRUCTURE_PROCESS_ENV.finditer(line):
            for name, offset in extract_destructured_names(match.group(1)):
                yield VariableUsage(
                    name=name,
                    location=FileLocation(
                        file=display_path,
                        line=line_num,
                        column=match.start(1) + offset + 1,
                    ),
                    dialect=dialect,
                    context=line.strip(),
                )


def scan_javascript(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return _scan(content, file_path, Dialect.javascript)


def scan_typescript(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return _scan(content, file_path, Dialect.typescript)
