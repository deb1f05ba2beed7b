"""Variables defined in env files but never read in code."""

from ..models import FileLocation, Issue, IssueKind, Severity, VariableDefinition, VariableUsage


def find_unused_vars(
    definitions: list[VariableDefinition],
    usages: list[VariableUsage],
) -> list[Issue]:
    defined_names = {d.name for d in definitions}
    used_names = {u.name for u in usages}

    issues = []
    for name in sorted(defined_names - used_names):
        locations = sorted(
            (d.location for d in definitions if d.name == name),
            key=FileLocation.sort_key,
        )
        issues.append(Issue(
            kind=IssueKind.unused_variable,
            severity=Severity.warning,
            variable_name=name,
            message=f"'{name}' is defined but never used in code",
            locations=locations,
            suggestion=f"Remove {name} from your .env file if it's no longer needed",
        ))

    return issues
