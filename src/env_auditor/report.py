"""Report rendering: JSON dumps and Markdown summaries."""

from typing import Any

from .models import (
    CheckResult,
    EnvComparison,
    Issue,
    IssueKind,
    ScanReport,
    VariableListing,
)


def to_json(result: Any) -> dict:
    """JSON-safe dict for any result model."""
    return result.model_dump(mode="json")


def _format_issue(issue: Issue) -> list[str]:
    lines = [
        f"- **`{issue.variable_name}`** ({issue.severity.value}): {issue.message}",
    ]
    for location in issue.locations:
        lines.append(f"  - `{location}`")
    if issue.suggestion:
        lines.append(f"  - Suggestion: {issue.suggestion}")
    return lines


def format_markdown(report: ScanReport) -> str:
    """Render a scan report as Markdown: a summary table, then issues grouped by kind."""
    summary = report.summary
    lines = [
        "# Env Audit Report",
        "",
        "| Metric | Count |",
        "| --- | --- |",
        f"| Files scanned | {summary.files_scanned} |",
        f"| Env files found | {summary.env_files_found} |",
        f"| Variables defined | {summary.vars_defined} |",
        f"| Variables used | {summary.vars_used} |",
        f"| Errors | {summary.errors} |",
        f"| Warnings | {summary.warnings} |",
        f"| Info | {summary.infos} |",
        "",
    ]

    if not report.issues:
        lines.append("No issues found.")
        return "\n".join(lines) + "\n"

    # Group in IssueKind declaration order; within a group keep report order
    for kind in IssueKind:
        group = [i for i in report.issues if i.kind == kind]
        if not group:
            continue
        lines.append(f"## {kind.label} ({len(group)})")
        lines.append("")
        for issue in group:
            lines.extend(_format_issue(issue))
        lines.append("")

    lines.append(f"Found {summary.total_issues} issue(s) in {report.scan_duration_ms}ms.")
    return "\n".join(lines) + "\n"


def format_check_markdown(result: CheckResult) -> str:
    status = "PASSED" if result.passed else "FAILED"
    header = (
        f"**Check {status}**: {result.failing_issues} issue(s) "
        f"at or above {result.fail_on.value}\n\n"
    )
    return header + format_markdown(result.report)


def format_listing_markdown(listing: VariableListing) -> str:
    lines = [f"# Defined variables ({len(listing.defined)})", ""]
    for entry in listing.defined:
        lines.append(f"- `{entry.name}` ({', '.join(str(loc) for loc in entry.locations)})")
    lines.extend(["", f"# Used variables ({len(listing.used)})", ""])
    for entry in listing.used:
        lines.append(f"- `{entry.name}` ({len(entry.locations)} usage(s))")
    return "\n".join(lines) + "\n"


def format_comparison_markdown(comparison: EnvComparison) -> str:
    lines = [f"# Comparing `{comparison.file1}` and `{comparison.file2}`", ""]

    sections = [
        (f"Only in {comparison.file1}", comparison.only_in_file1),
        (f"Only in {comparison.file2}", comparison.only_in_file2),
        ("In both", comparison.in_both),
    ]
    for title, names in sections:
        lines.append(f"## {title} ({len(names)})")
        lines.append("")
        lines.extend(f"- `{name}`" for name in names)
        lines.append("")

    if comparison.differing_values:
        lines.append(f"## Different values ({len(comparison.differing_values)})")
        lines.append("")
        for diff in comparison.differing_values:
            lines.append(f"- `{diff.name}`: `{diff.value1}` vs `{diff.value2}`")
        lines.append("")

    return "\n".join(lines)
