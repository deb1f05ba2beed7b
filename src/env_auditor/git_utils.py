"""Git utilities for auditing a remote repository."""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from git import Repo

logger = logging.getLogger(__name__)


def clone_repo(repo_url: str) -> Path:
    """Shallow-clone a repository into a fresh temporary directory."""
    temp_path = Path(tempfile.mkdtemp(prefix="env_auditor_"))
    logger.info(f"Cloning {repo_url} into {temp_path}")
    try:
        Repo.clone_from(repo_url, temp_path, depth=1)
    except Exception:
        cleanup_repo(temp_path)
        raise
    return temp_path


def cleanup_repo(repo_path: Path) -> None:
    if repo_path.exists():
        shutil.rmtree(repo_path, ignore_errors=True)


@contextmanager
def cloned_repo(repo_url: str) -> Generator[Path, None, None]:
    """Clone a repository and remove the checkout afterwards.

    Yields:
        Path to the cloned repository.
    """
    repo_path = clone_repo(repo_url)
    try:
        yield repo_path
    finally:
        cleanup_repo(repo_path)
