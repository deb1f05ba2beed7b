"""C# env var usage extractor."""

import re
from pathlib import Path
from typing import Iterator

from ..models import Dialect, VariableUsage
from .common import ENV_NAME, scan_lines


DIALECT = Dialect.csharp

EXTENSIONS = ("cs",)

ENVIRONMENT_GETENV = re.compile(
    rf"""Environment\.GetEnvironmentVariable\s*\(\s*"({ENV_NAME})\""""
)
CONFIG_MANAGER = re.compile(
    rf"""ConfigurationManager\.AppSettings\[['"]({ENV_NAME})['"]\]"""
)

PATTERNS = (ENVIRONMENT_GETENV, CONFIG_MANAGER)


def scan(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return scan_lines(content, file_path, DIALECT, PATTERNS)
