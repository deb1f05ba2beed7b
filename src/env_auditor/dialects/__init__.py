"""Per-dialect env var usage extractors and the extension registry."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional

from ..models import Dialect, VariableUsage
from . import csharp, go, java, javascript, php, python, ruby, rust

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DialectScanner:
    """A usage extractor and the file extensions it claims."""

    dialect: Dialect
    extensions: tuple[str, ...]
    scan: Callable[[str, "str | Path"], Iterator[VariableUsage]]


# Registration order decides which scanner wins when extensions collide.
DIALECT_SCANNERS: tuple[DialectScanner, ...] = (
    DialectScanner(Dialect.javascript, javascript.JS_EXTENSIONS, javascript.scan_javascript),
    DialectScanner(Dialect.typescript, javascript.TS_EXTENSIONS, javascript.scan_typescript),
    DialectScanner(python.DIALECT, python.EXTENSIONS, python.scan),
    DialectScanner(rust.DIALECT, rust.EXTENSIONS, rust.scan),
    DialectScanner(go.DIALECT, go.EXTENSIONS, go.scan),
    DialectScanner(ruby.DIALECT, ruby.EXTENSIONS, ruby.scan),
    DialectScanner(php.DIALECT, php.EXTENSIONS, php.scan),
    DialectScanner(java.DIALECT, java.EXTENSIONS, java.scan),
    DialectScanner(csharp.DIALECT, csharp.EXTENSIONS, csharp.scan),
)

# Accepted spellings for language filters in configuration
DIALECT_ALIASES: dict[str, Dialect] = {
    "javascript": Dialect.javascript,
    "js": Dialect.javascript,
    "typescript": Dialect.typescript,
    "ts": Dialect.typescript,
    "python": Dialect.python,
    "py": Dialect.python,
    "rust": Dialect.rust,
    "rs": Dialect.rust,
    "go": Dialect.go,
    "ruby": Dialect.ruby,
    "rb": Dialect.ruby,
    "php": Dialect.php,
    "java": Dialect.java,
    "csharp": Dialect.csharp,
    "cs": Dialect.csharp,
    "c#": Dialect.csharp,
}


def _normalize_extension(extension: str) -> str:
    return extension.lower().lstrip(".")


def build_extension_table(
    scanners: tuple[DialectScanner, ...] | list[DialectScanner],
) -> dict[str, DialectScanner]:
    """Map each extension to the first scanner that claims it."""
    table: dict[str, DialectScanner] = {}
    for scanner in scanners:
        for ext in scanner.extensions:
            ext = _normalize_extension(ext)
            existing = table.get(ext)
            if existing is not None:
                logger.warning(
                    f"Extension '.{ext}' claimed by both {existing.dialect.value} and "
                    f"{scanner.dialect.value}; keeping {existing.dialect.value}"
                )
                continue
            table[ext] = scanner
    return table


_EXTENSION_TABLE = build_extension_table(DIALECT_SCANNERS)


def scanner_for(file_extension: str) -> Optional[DialectScanner]:
    """Return the scanner registered for an extension (with or without the dot)."""
    return _EXTENSION_TABLE.get(_normalize_extension(file_extension))


def scanner_for_path(path: str | Path) -> Optional[DialectScanner]:
    """Return the scanner for a file path based on its suffix."""
    suffix = Path(path).suffix
    if not suffix:
        return None
    return scanner_for(suffix)


def parse_dialect(name: str) -> Optional[Dialect]:
    """Resolve a language name or alias from configuration."""
    return DIALECT_ALIASES.get(name.strip().lower())


def extensions_for(dialects: set[Dialect] | None = None) -> frozenset[str]:
    """All registered extensions, optionally restricted to some dialects."""
    return frozenset(
        ext
        for ext, scanner in _EXTENSION_TABLE.items()
        if dialects is None or scanner.dialect in dialects
    )


__all__ = [
    "DialectScanner",
    "DIALECT_SCANNERS",
    "build_extension_table",
    "scanner_for",
    "scanner_for_path",
    "parse_dialect",
    "extensions_for",
]
