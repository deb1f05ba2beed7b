"""Ruby env var usage extractor: ENV['VAR'] and ENV.fetch('VAR')."""

import re
from pathlib import Path
from typing import Iterator

from ..models import Dialect, VariableUsage
from .common import ENV_NAME, scan_lines


DIALECT = Dialect.ruby

EXTENSIONS = ("rb",)

ENV_BRACKET = re.compile(rf"""ENV\[['"]({ENV_NAME})['"]\]""")
ENV_FETCH = re.compile(rf"""ENV\.fetch\s*\(\s*['"]({ENV_NAME})['"]""")

PATTERNS = (ENV_BRACKET, ENV_FETCH)


def scan(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return scan_lines(content, file_path, DIALECT, PATTERNS)
