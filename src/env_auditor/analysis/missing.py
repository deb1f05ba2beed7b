"""Variables used in code but not defined in any env file."""

from ..models import FileLocation, Issue, IssueKind, Severity, VariableDefinition, VariableUsage


def find_missing_vars(
    definitions: list[VariableDefinition],
    usages: list[VariableUsage],
) -> list[Issue]:
    defined_names = {d.name for d in definitions}
    used_names = {u.name for u in usages}

    locations_by_name: dict[str, list[FileLocation]] = {}
    for usage in usages:
        locations_by_name.setdefault(usage.name, []).append(usage.location)

    issues = []
    for name in sorted(used_names - defined_names):
        locations = sorted(locations_by_name[name], key=FileLocation.sort_key)

        if len(locations) == 1:
            message = f"'{name}' is used in code but not defined in any .env file"
        else:
            message = (
                f"'{name}' is used in {len(locations)} locations "
                "but not defined in any .env file"
            )

        issues.append(Issue(
            kind=IssueKind.missing_variable,
            severity=Severity.error,
            variable_name=name,
            message=message,
            locations=locations,
            suggestion=f"Add {name} to your .env file",
        ))

    return issues
