"""Rust env var usage extractor.

Detects runtime lookups (``env::var``, ``env::var_os``, with or without the
``std::`` prefix) and the compile-time ``env!`` / ``option_env!`` macros.
"""

import re
from pathlib import Path
from typing import Iterator

from ..models import Dialect, VariableUsage
from .common import ENV_NAME, scan_lines


DIALECT = Dialect.rust

EXTENSIONS = ("rs",)

ENV_VAR = re.compile(rf"""(?:std::)?env::var\s*\(\s*"({ENV_NAME})\"""")
ENV_VAR_OS = re.compile(rf"""(?:std::)?env::var_os\s*\(\s*"({ENV_NAME})\"""")
# \b keeps env! from matching inside option_env!
ENV_MACRO = re.compile(rf"""\benv!\s*\(\s*"({ENV_NAME})\"""")
OPTION_ENV_MACRO = re.compile(rf"""option_env!\s*\(\s*"({ENV_NAME})\"""")

PATTERNS = (ENV_VAR, ENV_VAR_OS, ENV_MACRO, OPTION_ENV_MACRO)


def scan(content: str, file_path: str | Path) -> Iterator[VariableUsage]:
    return scan_lines(content, file_path, DIALECT, PATTERNS)
