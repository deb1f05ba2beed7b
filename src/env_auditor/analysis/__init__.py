"""Cross-reference analysis of env var definitions against usages."""

from ..config import ChecksConfig
from ..models import Issue, NamingRule, VariableDefinition, VariableUsage
from .duplicates import find_duplicate_definitions
from .missing import find_missing_vars
from .naming import compile_ignore_patterns, find_naming_issues
from .unused import find_unused_vars


def sort_issues(issues: list[Issue]) -> list[Issue]:
    """Errors first, then warnings, then info; ties by variable name."""
    return sorted(issues, key=lambda i: (-i.severity.rank, i.variable_name))


def analyze(
    definitions: list[VariableDefinition],
    usages: list[VariableUsage],
    rules: list[NamingRule],
    ignore_patterns: list[str] | None = None,
    checks: ChecksConfig | None = None,
) -> list[Issue]:
    """Run the selected analyses and return their issues in report order."""
    checks = checks or ChecksConfig()
    issues: list[Issue] = []

    if checks.missing:
        issues.extend(find_missing_vars(definitions, usages))
    if checks.unused:
        issues.extend(find_unused_vars(definitions, usages))
    if checks.naming:
        issues.extend(find_naming_issues(definitions, usages, rules, ignore_patterns))
    if checks.duplicates:
        issues.extend(find_duplicate_definitions(definitions))

    return sort_issues(issues)


__all__ = [
    "analyze",
    "sort_issues",
    "compile_ignore_patterns",
    "find_missing_vars",
    "find_unused_vars",
    "find_naming_issues",
    "find_duplicate_definitions",
]
