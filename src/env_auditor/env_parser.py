"""Parsing of .env files into variable definitions.

Grammar, one definition per line:
- blank lines and lines starting with ``#`` are skipped
- an optional leading ``export `` is stripped
- the line is split at the first ``=``
- the key must start with an ASCII letter or underscore, followed by ASCII
  letters, digits or underscores
- the value is trimmed, then one matching pair of surrounding quotes is removed

No interpolation, multi-line values or escape sequences.
"""

import re
from pathlib import Path
from typing import Optional

from .models import FileLocation, VariableDefinition


_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class EnvFileError(OSError):
    """An explicitly requested env file is missing or unreadable."""


def is_valid_env_var_name(name: str) -> bool:
    """Check if a string is a valid env file key."""
    return bool(_KEY_RE.fullmatch(name))


def strip_quotes(value: str) -> str:
    """Remove one matching pair of surrounding single or double quotes."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_env_line(line: str) -> Optional[tuple[str, str]]:
    """Parse a single env file line. Returns (key, value) or None."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    if line.startswith("export "):
        line = line[len("export "):]

    key, sep, value = line.partition("=")
    if not sep:
        return None

    key = key.strip()
    if not is_valid_env_var_name(key):
        return None

    return key, strip_quotes(value)


def parse_env_text(text: str, file_path: str | Path) -> list[VariableDefinition]:
    """Extract every definition from the text of an env file."""
    display_path = str(file_path)
    definitions = []

    # Only \n (and \r\n) end a line; str.splitlines would also break on \x0c, \x85, U+2028
    for line_num, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip("\r")
        parsed = parse_env_line(line)
        if parsed is None:
            continue
        name, value = parsed
        definitions.append(VariableDefinition(
            name=name,
            value=value,
            location=FileLocation(file=display_path, line=line_num),
        ))

    return definitions


def parse_env_file(
    path: str | Path,
    display_path: str | Path | None = None,
) -> list[VariableDefinition]:
    """Read and parse an env file.

    Args:
        path: File to read.
        display_path: Path recorded in definition locations (default: ``path``).

    Raises:
        EnvFileError: If the file does not exist or cannot be read.
    """
    path = Path(path)
    if not path.is_file():
        raise EnvFileError(f"Env file not found: {path}")
    try:
        # newline="" keeps a lone \r inside a value
        with open(path, encoding="utf-8", errors="replace", newline="") as f:
            text = f.read()
    except (IOError, OSError) as e:
        raise EnvFileError(f"Failed to read env file: {path} ({e})") from e

    return parse_env_text(text, display_path if display_path is not None else path)
