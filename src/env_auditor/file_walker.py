"""Discovery of source files and env files in a project tree."""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Generator

from git.config import GitConfigParser, get_config_path
from pathspec import GitIgnoreSpec

from .config import CONFIG_FILE_NAME
from .dialects import extensions_for, parse_dialect
from .models import Dialect

logger = logging.getLogger(__name__)


SKIP_DIRS = frozenset({
    "node_modules", ".git", "venv", ".venv", "__pycache__", "dist", "build",
    ".next", ".nuxt", "coverage", ".coverage", "vendor", "target",
    ".pytest_cache", ".mypy_cache", "Pods", ".gradle", ".cargo",
    "DerivedData", ".bundle", ".tox", ".eggs", "bower_components",
    ".terraform", ".serverless",
})

# Env files are also searched below the root, but not deeper than this
ENV_FILE_MAX_DEPTH = 3


def resolve_dialects(languages: list[str] | None) -> set[Dialect] | None:
    """Turn configured language names into dialects. None means all of them."""
    if languages is None:
        return None
    dialects = set()
    for name in languages:
        dialect = parse_dialect(name)
        if dialect is None:
            logger.warning(f"Ignoring unknown language '{name}'")
            continue
        dialects.add(dialect)
    return dialects


def is_excluded(relative_path: str, exclude: list[str]) -> bool:
    """Check a root-relative POSIX path against exclude globs.

    ``**/dir/**`` style patterns also match ``dir/...`` at the top level.
    """
    for pattern in exclude:
        if fnmatch.fnmatch(relative_path, pattern):
            return True
        if pattern.startswith("**/") and fnmatch.fnmatch(relative_path, pattern[3:]):
            return True
    return False


def global_excludes_file() -> Path:
    """The user's global gitignore: ``core.excludesFile``, else the XDG default."""
    reader = GitConfigParser(get_config_path("global"), read_only=True)
    configured = reader.get_value("core", "excludesfile", "")
    if configured:
        return Path(os.path.expanduser(str(configured)))
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(config_home) / "git" / "ignore"


class GitIgnoreFilter:
    """Gitignore rules of one project.

    Collects ``.git/info/exclude``, the global excludes file and every
    ``.gitignore`` met while walking. Each ``.gitignore`` applies to paths
    below its own directory.
    """

    def __init__(self, root: str | Path, include_global: bool = True):
        self.root = Path(root)
        self._specs: list[tuple[str, GitIgnoreSpec]] = []
        if include_global:
            self._add_file(global_excludes_file(), "")
        self._add_file(self.root / ".git" / "info" / "exclude", "")

    def _add_file(self, path: Path, base: str) -> None:
        if not path.is_file():
            return
        try:
            lines = path.read_text(encoding="utf-8", errors="ignore").splitlines()
        except (IOError, OSError) as e:
            logger.debug(f"Could not read ignore file {path}: {e}")
            return
        self._specs.append((base, GitIgnoreSpec.from_lines(lines)))

    def add_directory(self, directory: Path) -> None:
        """Pick up the ``.gitignore`` of a directory about to be walked."""
        relative = directory.relative_to(self.root).as_posix()
        self._add_file(directory / ".gitignore", "" if relative == "." else relative)

    def is_ignored(self, path: Path, is_dir: bool = False) -> bool:
        relative = path.relative_to(self.root).as_posix()
        for base, spec in self._specs:
            if base:
                if not relative.startswith(base + "/"):
                    continue
                candidate = relative[len(base) + 1:]
            else:
                candidate = relative
            if is_dir:
                candidate += "/"
            if spec.match_file(candidate):
                return True
        return False


def walk_project(
    root: str | Path,
    max_depth: int | None = None,
    ignore: GitIgnoreFilter | None = None,
) -> Generator[tuple[Path, list[str]], None, None]:
    """Walk a project tree, skipping known non-project directories.

    With ``ignore``, gitignored directories are pruned and gitignored files
    dropped. Yields (directory, file_names) tuples.
    """
    root = Path(root)
    if not root.exists() or not root.is_dir():
        return

    for dirpath, dirs, files in os.walk(root):
        current = Path(dirpath)
        if ignore is not None:
            ignore.add_directory(current)

        depth = len(current.relative_to(root).parts)
        if max_depth is not None and depth >= max_depth - 1:
            dirs[:] = []
        else:
            dirs[:] = sorted(
                d for d in dirs
                if d not in SKIP_DIRS
                and not (ignore is not None and ignore.is_ignored(current / d, is_dir=True))
            )

        if ignore is not None:
            files = [f for f in files if not ignore.is_ignored(current / f)]
        yield current, sorted(files)


def find_source_files(
    root: str | Path,
    exclude: list[str] | None = None,
    languages: list[str] | None = None,
    respect_gitignore: bool = True,
) -> list[Path]:
    """Find every source file that some registered dialect can scan.

    Gitignored files are skipped unless ``respect_gitignore`` is off.
    """
    root = Path(root)
    exclude = exclude or []
    exts = extensions_for(resolve_dialects(languages))
    ignore = GitIgnoreFilter(root) if respect_gitignore and root.is_dir() else None
    files = []

    for directory, names in walk_project(root, ignore=ignore):
        for name in names:
            path = directory / name
            ext = path.suffix.lower().lstrip(".")
            if not ext or ext not in exts:
                continue
            if is_excluded(path.relative_to(root).as_posix(), exclude):
                continue
            files.append(path)

    logger.debug(f"Found {len(files)} source files under {root}")
    return files


def find_env_files(root: str | Path, env_file_names: list[str] | None = None) -> list[Path]:
    """Find env files: configured names at the root first, then any .env* file nearby.

    Gitignore rules are not applied: local env files are normally gitignored.
    """
    root = Path(root)
    found: list[Path] = []

    for name in env_file_names or []:
        path = root / name
        if path.is_file() and path not in found:
            found.append(path)

    for directory, names in walk_project(root, max_depth=ENV_FILE_MAX_DEPTH):
        for name in names:
            if not name.startswith(".env") or name == CONFIG_FILE_NAME:
                continue
            path = directory / name
            if path.is_file() and path not in found:
                found.append(path)

    return found
