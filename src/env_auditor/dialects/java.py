"""Java env var usage extractor: System.getenv and System.getProperty."""

import re
from pathlib import Path
from typing import Iterator

from ..models import Dialect, VariableUsage
from .common import ENV_NAME, scan_lines


DIALECT = Dialect.java

EXTENSIONS = ("java",)

PATTERNS = (
    re.compile(rf"""System\.getenv\s*\(\s*"({ENV_NAME})\""""),
    re.compile(rf"""System\.getProperty\s*\(\s*"({ENV_NAME})\""""),
)


def scan(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return scan_lines(content, file_path, DIALECT, PATTERNS)
