#!/usr/bin/env python3
"""
Sandbox entrypoint for env-auditor.
Reads command parameters from stdin JSON, audits environment variables, outputs JSON to stdout.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).parent / "src"))

from git.exc import GitCommandError

from env_auditor.config import load_project_config
from env_auditor.git_utils import cloned_repo
from env_auditor.models import Severity
from env_auditor.report import (
    format_check_markdown,
    format_comparison_markdown,
    format_listing_markdown,
    format_markdown,
    to_json,
)
from env_auditor.scanner import (
    ScanOptions,
    checks_from_names,
    compare_env_files,
    init_config,
    judge_report,
    list_variables,
    repository_config,
    run_scan,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VALID_COMMANDS = {"scan", "check", "list", "compare", "init"}
VALID_FORMATS = {"json", "markdown"}
VALID_SEVERITIES = {s.value for s in Severity}


def _fail(payload: dict[str, Any]) -> None:
    print(json.dumps(payload))
    sys.exit(1)


def _build_options(input_data: dict[str, Any]) -> ScanOptions:
    checks = input_data.get("checks")
    min_severity = input_data.get("min_severity")
    return ScanOptions(
        env_files=input_data.get("env_files") or [],
        ignore=input_data.get("ignore") or [],
        languages=input_data.get("languages"),
        checks=checks_from_names(checks) if checks is not None else None,
        min_severity=Severity(min_severity) if min_severity else None,
    )


def _scan(path: str | None, repo_url: str | None, config_path: str | None, options: ScanOptions):
    """Scan a local path or a cloned repository. Returns (report, config)."""
    if repo_url:
        with cloned_repo(repo_url) as repo_path:
            config = repository_config(repo_path, config_path)
            return run_scan(repo_path, config, options), config
    config = load_project_config(path or ".", config_path)
    return run_scan(path or ".", config, options), config


def _run(command: str, input_data: dict[str, Any], requested_format: str | None) -> tuple[Any, bool]:
    """Run one command. Returns (printable result, passed).

    Without a requested format, scan, check and list use the project's
    ``[output] format``; compare and init default to JSON.
    """
    path = input_data.get("path")
    repo_url = input_data.get("repo_url")
    config_path = input_data.get("config_path")

    if command == "compare":
        comparison = compare_env_files(
            input_data["file1"],
            input_data["file2"],
            show_values=bool(input_data.get("show_values", False)),
            base_path=path,
        )
        if requested_format == "markdown":
            return {"markdown": format_comparison_markdown(comparison)}, True
        return to_json(comparison), True

    if command == "init":
        config_file = init_config(path or ".")
        return {"created": str(config_file)}, True

    options = _build_options(input_data)

    if command == "list":
        config = load_project_config(path or ".", config_path)
        listing = list_variables(path or ".", config, options)
        if (requested_format or config.output.format) == "markdown":
            return {"markdown": format_listing_markdown(listing)}, True
        return to_json(listing), True

    report, config = _scan(path, repo_url, config_path, options)
    output_format = requested_format or config.output.format

    if command == "check":
        result = judge_report(report, Severity(input_data.get("fail_on") or "error"))
        if output_format == "markdown":
            return {"markdown": format_check_markdown(result)}, result.passed
        return to_json(result), result.passed

    if output_format == "markdown":
        return {"markdown": format_markdown(report)}, True
    return to_json(report), True


def main() -> None:
    try:
        input_data = json.load(sys.stdin)
    except json.JSONDecodeError as e:
        _fail({"error": f"Invalid JSON input: {e}"})

    if not isinstance(input_data, dict):
        _fail({"error": "Input must be a JSON object"})

    command = input_data.get("command", "scan")
    if command not in VALID_COMMANDS:
        _fail(
            {
                "error": f"Invalid command '{command}'",
                "valid_commands": sorted(VALID_COMMANDS),
            }
        )

    if command == "compare" and not (input_data.get("file1") and input_data.get("file2")):
        _fail(
            {
                "error": "Missing required input: 'file1' and 'file2'",
                "example": {"command": "compare", "file1": ".env", "file2": ".env.example"},
            }
        )

    if input_data.get("path") and input_data.get("repo_url"):
        _fail({"error": "Provide either 'repo_url' or 'path', not both"})
    if input_data.get("repo_url") and command in {"list", "init", "compare"}:
        _fail({"error": f"'repo_url' is not supported for the '{command}' command"})

    output_format = input_data.get("format")
    if output_format is not None and output_format not in VALID_FORMATS:
        _fail(
            {
                "error": f"Invalid format '{output_format}'",
                "valid_formats": sorted(VALID_FORMATS),
            }
        )

    for key in ("min_severity", "fail_on"):
        value = input_data.get(key)
        if value is not None and value not in VALID_SEVERITIES:
            _fail(
                {
                    "error": f"Invalid {key} '{value}'",
                    "valid_severities": sorted(VALID_SEVERITIES),
                }
            )

    try:
        result, passed = _run(command, input_data, output_format)
    except GitCommandError as e:
        logger.error(f"Failed to clone repository: {e}")
        _fail({"error": f"Failed to clone repository: {e}"})
    except Exception as e:
        logger.error(f"{command} failed: {e}")
        _fail({"error": str(e)})

    print(json.dumps(result))
    if not passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
