"""Variables whose names deviate from a preferred naming convention."""

import logging
import re

from ..models import FileLocation, Issue, IssueKind, NamingRule, VariableDefinition, VariableUsage

logger = logging.getLogger(__name__)


def compile_ignore_patterns(patterns: list[str]) -> list[re.Pattern]:
    """Compile ignore regexes, dropping any that are invalid."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            logger.warning(f"Dropping invalid ignore pattern {pattern!r}: {e}")
    return compiled


def merge_locations(locations: list[FileLocation]) -> list[FileLocation]:
    """Sort by (file, line) and keep the first location seen for each pair."""
    merged: dict[tuple[str, int], FileLocation] = {}
    for location in sorted(locations, key=FileLocation.dedup_key):
        merged.setdefault(location.dedup_key(), location)
    return list(merged.values())


def find_naming_issues(
    definitions: list[VariableDefinition],
    usages: list[VariableUsage],
    rules: list[NamingRule],
    ignore_patterns: list[str] | None = None,
) -> list[Issue]:
    ignore_regexes = compile_ignore_patterns(ignore_patterns or [])
    all_names = {d.name for d in definitions} | {u.name for u in usages}

    issues = []
    for rule in rules:
        for alt_name in rule.alternative_names:
            if alt_name not in all_names:
                continue
            # Ignore patterns apply to the alternative, never the preferred name
            if any(regex.search(alt_name) for regex in ignore_regexes):
                continue

            # Definitions first so their column-less location wins a line tie
            locations = [d.location for d in definitions if d.name == alt_name]
            locations.extend(u.location for u in usages if u.name == alt_name)

            suggestion = f"Consider using '{rule.preferred_name}' instead of '{alt_name}'"
            if rule.description:
                suggestion += f" ({rule.description})"

            issues.append(Issue(
                kind=IssueKind.inconsistent_naming,
                severity=rule.severity,
                variable_name=alt_name,
                message=f"'{alt_name}' could be renamed to '{rule.preferred_name}' for consistency",
                locations=merge_locations(locations),
                suggestion=suggestion,
            ))

    return issues
