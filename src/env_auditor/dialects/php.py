"""PHP env var usage extractor.

Detects getenv('VAR'), $_ENV['VAR'], $_SERVER['VAR'] and Laravel's env('VAR').
"""

import re
from pathlib import Path
from typing import Iterator

from ..models import Dialect, VariableUsage
from .common import ENV_NAME, scan_lines


DIALECT = Dialect.php

EXTENSIONS = ("php",)

GETENV = re.compile(rf"""getenv\s*\(\s*['"]({ENV_NAME})['"]""")
DOLLAR_ENV = re.compile(rf"""\$_ENV\[['"]({ENV_NAME})['"]\]""")
DOLLAR_SERVER = re.compile(rf"""\$_SERVER\[['"]({ENV_NAME})['"]\]""")
LARAVEL_ENV = re.compile(rf"""\benv\s*\(\s*['"]({ENV_NAME})['"]""")

PATTERNS = (GETENV, DOLLAR_ENV, DOLLAR_SERVER, LARAVEL_ENV)


def scan(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return scan_lines(content, file_path, DIALECT, PATTERNS)
