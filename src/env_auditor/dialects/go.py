"""Go env var usage extractor: os.Getenv, os.LookupEnv, os.Setenv."""

import re
from pathlib import Path
from typing import Iterator

from ..models import Dialect, VariableUsage
from .common import ENV_NAME, scan_lines


DIALECT = Dialect.go

EXTENSIONS = ("go",)

PATTERNS = (
    re.compile(rf"""os\.Getenv\s*\(\s*"({ENV_NAME})\""""),
    re.compile(rf"""os\.LookupEnv\s*\(\s*"({ENV_NAME})\""""),
    # Setenv counts as a reference: the program depends on the name
    re.compile(rf"""os\.Setenv\s*\(\s*"({ENV_NAME})\""""),
)


def scan(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return scan_lines(content, file_path, DIALECT, PATTERNS)
