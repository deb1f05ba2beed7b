"""Tests for scan orchestration and reports."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from env_auditor.config import CONFIG_FILE_NAME, AuditConfig, ChecksConfig, ConfigError, load_config
from env_auditor.env_parser import EnvFileError
from env_auditor.models import IssueKind, Severity
from env_auditor.report import format_check_markdown, format_comparison_markdown, format_markdown, to_json
from env_auditor.scanner import (
    ScanOptions,
    checks_from_names,
    compare_env_files,
    init_config,
    list_variables,
    run_check,
    run_scan,
    scan_repository,
)


@pytest.fixture
def project():
    """A small project with one missing, one unused and one misnamed variable."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / ".env").write_text("DATABASE_URL=postgres://localhost/app\nDB_URL=x\nUNUSED_FLAG=1\n")
        (root / "src").mkdir()
        (root / "src" / "app.js").write_text(
            "const db = process.env.DATABASE_URL;\n"
            "const legacy = process.env.DB_URL;\n"
            "const key = process.env.API_KEY;\n"
        )
        (root / "worker.py").write_text("import os\nkey = os.environ['API_KEY']\n")
        (root / "node_modules" / "lib").mkdir(parents=True)
        (root / "node_modules" / "lib" / "index.js").write_text("process.env.VENDOR_ONLY\n")
        yield root


class TestRunScan:
    """Test full scans of a project directory."""

    def test_scan_finds_each_kind(self, project):
        report = run_scan(project)

        found = {(i.kind, i.variable_name) for i in report.issues}
        assert found == {
            (IssueKind.missing_variable, "API_KEY"),
            (IssueKind.unused_variable, "UNUSED_FLAG"),
            (IssueKind.inconsistent_naming, "DB_URL"),
        }
        assert report.issues[0].severity == Severity.error

    def test_summary_counts(self, project):
        summary = run_scan(project).summary

        assert summary.files_scanned == 2
        assert summary.env_files_found == 1
        assert summary.vars_defined == 3
        assert summary.vars_used == 3
        assert summary.total_issues == 3
        assert (summary.errors, summary.warnings, summary.infos) == (1, 2, 0)

    def test_missing_locations_span_dialects(self, project):
        report = run_scan(project)

        [missing] = [i for i in report.issues if i.kind == IssueKind.missing_variable]
        assert [(l.file, l.line) for l in missing.locations] == [("src/app.js", 3), ("worker.py", 2)]

    def test_vendor_directories_not_scanned(self, project):
        report = run_scan(project)
        assert "VENDOR_ONLY" not in {u.name for u in report.usages}

    def test_gitignored_sources_not_scanned(self, project):
        """Test a usage only in a gitignored directory is not reported missing."""
        (project / ".gitignore").write_text("generated/\n")
        (project / "generated").mkdir()
        (project / "generated" / "client.js").write_text("process.env.GENERATED_ONLY\n")

        report = run_scan(project)
        unfiltered = run_scan(project, AuditConfig.model_validate({"scan": {"respect_gitignore": False}}))

        assert "GENERATED_ONLY" not in {i.variable_name for i in report.issues}
        assert "GENERATED_ONLY" in {i.variable_name for i in unfiltered.issues}

    def test_min_severity_filters_issues(self, project):
        report = run_scan(project, options=ScanOptions(min_severity=Severity.error))

        assert [i.variable_name for i in report.issues] == ["API_KEY"]
        assert report.summary.total_issues == 1

    def test_checks_selection(self, project):
        report = run_scan(project, options=ScanOptions(checks=checks_from_names(["unused"])))
        assert {i.kind for i in report.issues} == {IssueKind.unused_variable}

    def test_extra_ignore_pattern(self, project):
        report = run_scan(project, options=ScanOptions(ignore=["^DB_"]))
        assert IssueKind.inconsistent_naming not in {i.kind for i in report.issues}

    def test_language_filter(self, project):
        report = run_scan(project, options=ScanOptions(languages=["python"]))

        assert {u.location.file for u in report.usages} == {"worker.py"}
        assert report.summary.files_scanned == 1

    def test_extra_env_file(self, project):
        (project / "config").mkdir()
        (project / "config" / "secrets.env").write_text("API_KEY=abc\n")

        report = run_scan(project, options=ScanOptions(env_files=["config/secrets.env"]))

        assert "API_KEY" not in {i.variable_name for i in report.issues}
        assert report.summary.env_files_found == 2

    def test_missing_extra_env_file_fails(self, project):
        with pytest.raises(EnvFileError) as exc_info:
            run_scan(project, options=ScanOptions(env_files=[".env.production"]))

        assert ".env.production" in str(exc_info.value)

    def test_project_config_applied(self, project):
        (project / CONFIG_FILE_NAME).write_text("[checks]\nunused = false\nnaming = false\n")

        report = run_scan(project)

        assert [i.variable_name for i in report.issues] == ["API_KEY"]

    def test_invalid_project_config(self, project):
        (project / CONFIG_FILE_NAME).write_text("not = [valid")

        with pytest.raises(ConfigError):
            run_scan(project)

    def test_not_a_directory(self, project):
        with pytest.raises(ValueError):
            run_scan(project / "does-not-exist")
        with pytest.raises(ValueError):
            run_scan(project / ".env")

    def test_usages_in_stable_order(self, project):
        first = run_scan(project)
        second = run_scan(project)

        assert first.usages == second.usages
        assert first.issues == second.issues
        assert first.scan_id != second.scan_id

    def test_empty_project(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            report = run_scan(tmpdir)

        assert report.issues == []
        assert report.summary.files_scanned == 0


class TestRunCheck:
    """Test pass/fail checks."""

    def test_fails_on_error(self, project):
        result = run_check(project)

        assert result.passed is False
        assert result.failing_issues == 1

    def test_fail_on_warning_counts_more(self, project):
        result = run_check(project, fail_on=Severity.warning)
        assert result.failing_issues == 3

    def test_passes_without_errors(self, project):
        config = AuditConfig(checks=ChecksConfig(missing=False))
        result = run_check(project, config)

        assert result.passed is True
        assert result.report.summary.warnings == 2


class TestChecksFromNames:
    """Test check selection by name."""

    def test_only_named_checks_enabled(self):
        checks = checks_from_names(["missing", "duplicates"])
        assert (checks.missing, checks.unused, checks.naming, checks.duplicates) == (True, False, False, True)

    def test_unknown_check(self):
        with pytest.raises(ValueError, match="bogus"):
            checks_from_names(["bogus"])


class TestListVariables:
    """Test listing defined and used variables."""

    def test_listing(self, project):
        listing = list_variables(project)

        assert [e.name for e in listing.defined] == ["DATABASE_URL", "DB_URL", "UNUSED_FLAG"]
        assert [e.name for e in listing.used] == ["API_KEY", "DATABASE_URL", "DB_URL"]
        api_key = listing.used[0]
        assert [l.file for l in api_key.locations] == ["src/app.js", "worker.py"]


class TestCompareEnvFiles:
    """Test two-file comparison."""

    def test_compare(self, project):
        (project / ".env.example").write_text("DATABASE_URL=\nAPI_KEY=\nDB_URL=x\n")

        result = compare_env_files(".env", ".env.example", base_path=project)

        assert result.only_in_file1 == ["UNUSED_FLAG"]
        assert result.only_in_file2 == ["API_KEY"]
        assert result.in_both == ["DATABASE_URL", "DB_URL"]
        assert result.differing_values == []

    def test_compare_with_values(self, project):
        (project / ".env.example").write_text("DATABASE_URL=\nDB_URL=x\n")

        result = compare_env_files(project / ".env", project / ".env.example", show_values=True)

        assert [(d.name, d.value1, d.value2) for d in result.differing_values] == [
            ("DATABASE_URL", "postgres://localhost/app", ""),
        ]

    def test_compare_missing_file_names_path(self, project):
        with pytest.raises(EnvFileError) as exc_info:
            compare_env_files(project / ".env", project / ".env.staging")

        assert ".env.staging" in str(exc_info.value)


class TestInitConfig:
    """Test writing the default config file."""

    def test_init_writes_loadable_config(self, project):
        path = init_config(project)

        assert path == project.resolve() / CONFIG_FILE_NAME
        assert load_config(path).naming.ignore_patterns == ["^_", "^INTERNAL_"]

    def test_init_refuses_to_overwrite(self, project):
        (project / CONFIG_FILE_NAME).write_text("# mine\n")

        with pytest.raises(FileExistsError):
            init_config(project)

        assert (project / CONFIG_FILE_NAME).read_text() == "# mine\n"


class TestScanRepository:
    """Test scanning a cloned repository."""

    def test_scan_repository_uses_clone(self, project):
        with patch("env_auditor.git_utils.clone_repo", return_value=project), \
                patch("env_auditor.git_utils.cleanup_repo") as cleanup:
            report = scan_repository("https://github.com/example/app")

        assert report.summary.total_issues == 3
        cleanup.assert_called_once_with(project)


class TestReport:
    """Test report rendering."""

    def test_json_is_serializable(self, project):
        data = to_json(run_scan(project))

        assert data["summary"]["total_issues"] == 3
        assert data["issues"][0]["severity"] == "error"
        assert data["usages"][0]["dialect"] in {"javascript", "python"}

    def test_markdown_groups_by_kind(self, project):
        text = format_markdown(run_scan(project))

        assert text.startswith("# Env Audit Report")
        assert "## Missing env var (1)" in text
        assert "## Unused env var (1)" in text
        assert "## Inconsistent naming (1)" in text
        assert "`src/app.js:3:25`" in text
        assert "Suggestion: Add API_KEY to your .env file" in text

    def test_markdown_without_issues(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            text = format_markdown(run_scan(tmpdir))
        assert "No issues found." in text

    def test_check_markdown_header(self, project):
        assert format_check_markdown(run_check(project)).startswith("**Check FAILED**")

    def test_comparison_markdown(self, project):
        (project / ".env.example").write_text("API_KEY=\n")
        text = format_comparison_markdown(compare_env_files(".env", ".env.example", base_path=project))

        assert "## Only in .env.example (1)" in text
        assert "- `API_KEY`" in text
