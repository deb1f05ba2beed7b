"""Python env var usage extractor.

Detects:
- os.environ['VAR'] and os.environ.get('VAR')
- os.getenv('VAR')
- environ['VAR'] / environ.get('VAR') after ``from os import environ``
- getenv('VAR') after ``from os import getenv``
"""

import re
from pathlib import Path
from typing import Iterator

from ..models import Dialect, VariableUsage
from .common import ENV_NAME, scan_lines


DIALECT = Dialect.python

EXTENSIONS = ("py",)

OS_ENVIRON_BRACKET = re.compile(rf"""os\.environ\[['"]({ENV_NAME})['"]\]""")
OS_ENVIRON_GET = re.compile(rf"""os\.environ\.get\s*\(\s*['"]({ENV_NAME})['"]""")
OS_GETENV = re.compile(rf"""os\.getenv\s*\(\s*['"]({ENV_NAME})['"]""")
ENVIRON_BRACKET = re.compile(rf"""\benviron\[['"]({ENV_NAME})['"]\]""")
ENVIRON_GET = re.compile(rf"""\benviron\.get\s*\(\s*['"]({ENV_NAME})['"]""")
GETENV_DIRECT = re.compile(rf"""\bgetenv\s*\(\s*['"]({ENV_NAME})['"]""")

PATTERNS = (
    OS_ENVIRON_BRACKET,
    OS_ENVIRON_GET,
    OS_GETENV,
    ENVIRON_BRACKET,
    ENVIRON_GET,
    GETENV_DIRECT,
)


def scan(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return scan_lines(content, file_path, DIALECT, PATTERNS)
