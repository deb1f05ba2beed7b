"""Scan orchestration: scan, check, list, compare and init operations."""

import logging
import time
import uuid
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .analysis import analyze
from .collector import collect_definitions, collect_usages
from .config import CONFIG_FILE_NAME, AuditConfig, ChecksConfig, generate_default_config, load_project_config
from .env_parser import parse_env_file
from .file_walker import find_env_files, find_source_files
from .git_utils import cloned_repo
from .models import (
    CheckResult,
    EnvComparison,
    FileLocation,
    NamedLocations,
    ScanReport,
    ScanSummary,
    Severity,
    ValueDifference,
    VariableDefinition,
    VariableListing,
    VariableUsage,
)
from .rules import get_all_rules

logger = logging.getLogger(__name__)

CHECK_NAMES = ("missing", "unused", "naming", "duplicates")


class ScanOptions(BaseModel):
    """Per-run overrides on top of the project configuration."""

    env_files: list[str] = Field(
        default_factory=list,
        description="Additional env files; these must exist",
    )
    ignore: list[str] = Field(default_factory=list, description="Additional naming ignore regexes")
    languages: Optional[list[str]] = Field(default=None, description="Restrict the scan to these languages")
    checks: Optional[ChecksConfig] = Field(default=None, description="Analyses to run (default: from config)")
    min_severity: Optional[Severity] = Field(default=None, description="Drop issues below this severity")


def checks_from_names(names: list[str]) -> ChecksConfig:
    """Build a check selection that runs only the named analyses.

    Raises:
        ValueError: If a name is not one of CHECK_NAMES.
    """
    unknown = sorted(set(names) - set(CHECK_NAMES))
    if unknown:
        raise ValueError(f"Unknown checks: {', '.join(unknown)}. Valid checks: {', '.join(CHECK_NAMES)}")
    return ChecksConfig(**{name: name in names for name in CHECK_NAMES})


def _resolve_project(project_path: str | Path) -> Path:
    root = Path(project_path).resolve()
    if not root.exists():
        raise ValueError(f"Path does not exist: {project_path}")
    if not root.is_dir():
        raise ValueError(f"Path is not a directory: {project_path}")
    return root


def _resolve_file(path: str | Path, root: Path | None) -> Path:
    path = Path(path)
    if root is not None and not path.is_absolute():
        return root / path
    return path


def collect_facts(
    root: Path,
    config: AuditConfig,
    options: ScanOptions,
) -> tuple[list[VariableDefinition], list[VariableUsage], int, int]:
    """Discover files and extract facts. Returns (definitions, usages, source count, env count)."""
    env_files = find_env_files(root, config.scan.env_files)
    definitions = collect_definitions(env_files, root)

    # Explicitly named env files fail loudly
    for extra in options.env_files:
        path = _resolve_file(extra, root)
        if path.resolve() in {p.resolve() for p in env_files}:
            continue
        definitions.extend(parse_env_file(path, extra))
        env_files.append(path)

    languages = options.languages if options.languages is not None else config.scan.languages
    source_files = find_source_files(
        root,
        config.scan.exclude,
        languages,
        respect_gitignore=config.scan.respect_gitignore,
    )
    usages = collect_usages(source_files, root)
    # Completion order from the worker pool is arbitrary
    usages.sort(key=lambda u: (u.location.sort_key(), u.name))

    return definitions, usages, len(source_files), len(env_files)


def run_scan(
    project_path: str | Path,
    config: AuditConfig | None = None,
    options: ScanOptions | None = None,
) -> ScanReport:
    """Scan a project and build the full report.

    Raises:
        ValueError: If the project path is not a directory.
        EnvFileError: If an explicitly named env file cannot be read.
        ConfigError: If the project's config file is invalid.
    """
    start = time.monotonic()
    root = _resolve_project(project_path)
    config = config or load_project_config(root)
    options = options or ScanOptions()

    logger.info(f"Scanning {root}")
    definitions, usages, files_scanned, env_files_found = collect_facts(root, config, options)

    rules = get_all_rules(config.naming)
    ignore_patterns = config.naming.ignore_patterns + options.ignore
    checks = options.checks or config.checks
    issues = analyze(definitions, usages, rules, ignore_patterns, checks)

    min_severity = options.min_severity or config.output.min_severity
    issues = [i for i in issues if i.severity.rank >= min_severity.rank]

    summary = ScanSummary.from_facts(
        issues,
        definitions,
        usages,
        files_scanned=files_scanned,
        env_files_found=env_files_found,
    )
    duration_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        f"Scanned {files_scanned} files and {env_files_found} env files in {duration_ms}ms: "
        f"{summary.errors} errors, {summary.warnings} warnings, {summary.infos} info"
    )

    return ScanReport(
        scan_id=str(uuid.uuid4()),
        summary=summary,
        issues=issues,
        definitions=definitions,
        usages=usages,
        scan_duration_ms=duration_ms,
    )


def run_check(
    project_path: str | Path,
    config: AuditConfig | None = None,
    fail_on: Severity = Severity.error,
    options: ScanOptions | None = None,
) -> CheckResult:
    """Scan and decide pass/fail: any issue at or above ``fail_on`` fails."""
    return judge_report(run_scan(project_path, config, options), fail_on)


def judge_report(report: ScanReport, fail_on: Severity = Severity.error) -> CheckResult:
    failing = sum(1 for i in report.issues if i.severity.rank >= fail_on.rank)
    return CheckResult(
        passed=failing == 0,
        fail_on=fail_on,
        failing_issues=failing,
        report=report,
    )


def _group_locations(facts: list[VariableDefinition] | list[VariableUsage]) -> list[NamedLocations]:
    grouped: dict[str, list[FileLocation]] = {}
    for fact in facts:
        grouped.setdefault(fact.name, []).append(fact.location)
    return [
        NamedLocations(name=name, locations=sorted(locations, key=FileLocation.sort_key))
        for name, locations in sorted(grouped.items())
    ]


def list_variables(
    project_path: str | Path,
    config: AuditConfig | None = None,
    options: ScanOptions | None = None,
) -> VariableListing:
    """List every distinct defined and used variable with its locations."""
    root = _resolve_project(project_path)
    config = config or load_project_config(root)
    definitions, usages, _, _ = collect_facts(root, config, options or ScanOptions())
    return VariableListing(
        defined=_group_locations(definitions),
        used=_group_locations(usages),
    )


def compare_env_files(
    file1: str | Path,
    file2: str | Path,
    show_values: bool = False,
    base_path: str | Path | None = None,
) -> EnvComparison:
    """Compare two env files by variable name.

    Raises:
        EnvFileError: If either file is missing or unreadable.
    """
    root = Path(base_path) if base_path is not None else None
    defs1 = parse_env_file(_resolve_file(file1, root), str(file1))
    defs2 = parse_env_file(_resolve_file(file2, root), str(file2))

    # First definition wins when a file repeats a name
    values1: dict[str, Optional[str]] = {}
    for d in defs1:
        values1.setdefault(d.name, d.value)
    values2: dict[str, Optional[str]] = {}
    for d in defs2:
        values2.setdefault(d.name, d.value)

    names1, names2 = set(values1), set(values2)
    in_both = sorted(names1 & names2)

    differing = []
    if show_values:
        differing = [
            ValueDifference(name=name, value1=values1[name], value2=values2[name])
            for name in in_both
            if values1[name] != values2[name]
        ]

    return EnvComparison(
        file1=str(file1),
        file2=str(file2),
        only_in_file1=sorted(names1 - names2),
        only_in_file2=sorted(names2 - names1),
        in_both=in_both,
        differing_values=differing,
    )


def init_config(project_path: str | Path) -> Path:
    """Write a default config file into the project.

    Raises:
        FileExistsError: If the project already has a config file.
    """
    config_path = _resolve_project(project_path) / CONFIG_FILE_NAME
    if config_path.exists():
        raise FileExistsError(f"Config file already exists: {config_path}")
    config_path.write_text(generate_default_config(), encoding="utf-8")
    logger.info(f"Created config file: {config_path}")
    return config_path


def scan_repository(
    repo_url: str,
    options: ScanOptions | None = None,
    config_path: str | None = None,
) -> ScanReport:
    """Clone a repository and scan it.

    ``config_path`` is resolved inside the checkout; without it the repository's
    own config file is used, if any.
    """
    with cloned_repo(repo_url) as repo_path:
        return run_scan(repo_path, repository_config(repo_path, config_path), options)


def repository_config(repo_path: str | Path, config_path: str | None = None) -> AuditConfig:
    """Load the config of a checked-out repository; ``config_path`` is relative to the checkout."""
    repo_path = Path(repo_path)
    return load_project_config(
        repo_path,
        _resolve_file(config_path, repo_path) if config_path else None,
    )
