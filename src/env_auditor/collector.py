"""Fact collection: usages from source files, definitions from env files."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .dialects import scanner_for_path
from .env_parser import EnvFileError, parse_env_file
from .models import VariableDefinition, VariableUsage

logger = logging.getLogger(__name__)


def _display_path(path: Path, base_path: Path | None) -> str:
    if base_path is not None:
        try:
            return path.relative_to(base_path).as_posix()
        except ValueError:
            pass
    return str(path)


def scan_source_file(
    file_path: str | Path,
    base_path: str | Path | None = None,
) -> list[VariableUsage]:
    """Scan one source file. Unreadable or unsupported files yield no usages."""
    file_path = Path(file_path)
    scanner = scanner_for_path(file_path)
    if scanner is None:
        logger.debug(f"No dialect for {file_path}, skipping")
        return []

    try:
        content = file_path.read_text(encoding="utf-8", errors="ignore")
    except (IOError, OSError) as e:
        logger.debug(f"Could not read {file_path}: {e}")
        return []

    display = _display_path(file_path, Path(base_path) if base_path else None)
    return list(scanner.scan(content, display))


def collect_usages(
    files: list[str | Path],
    base_path: str | Path | None = None,
    max_workers: int | None = None,
) -> list[VariableUsage]:
    """Scan files in parallel and merge their usages.

    The merged order follows completion order; callers must not rely on it.
    """
    if not files:
        return []

    usages: list[VariableUsage] = []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(scan_source_file, path, base_path): path
            for path in files
        }
        for future in as_completed(futures):
            usages.extend(future.result())

    return usages


def collect_definitions(
    files: list[str | Path],
    base_path: str | Path | None = None,
) -> list[VariableDefinition]:
    """Parse discovered env files. A file that cannot be read is skipped."""
    definitions: list[VariableDefinition] = []
    base = Path(base_path) if base_path else None

    for path in files:
        path = Path(path)
        try:
            definitions.extend(parse_env_file(path, _display_path(path, base)))
        except EnvFileError as e:
            logger.warning(f"Skipping env file: {e}")

    return definitions
