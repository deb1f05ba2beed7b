"""Names defined more than once inside the same env file."""

from ..models import FileLocation, Issue, IssueKind, Severity, VariableDefinition


def find_duplicate_definitions(definitions: list[VariableDefinition]) -> list[Issue]:
    """One issue per (file, name) defined on more than one line.

    The same name in different files (``.env`` and ``.env.example``) is normal
    and not reported.
    """
    by_file_and_name: dict[tuple[str, str], list[VariableDefinition]] = {}
    for definition in definitions:
        key = (definition.location.file, definition.name)
        by_file_and_name.setdefault(key, []).append(definition)

    issues = []
    for (file, name), defs in sorted(by_file_and_name.items()):
        if len(defs) < 2:
            continue
        locations = sorted((d.location for d in defs), key=FileLocation.sort_key)
        values = {d.value for d in defs}
        detail = "with different values" if len(values) > 1 else "with the same value"
        issues.append(Issue(
            kind=IssueKind.duplicate_definition,
            severity=Severity.info,
            variable_name=name,
            message=f"'{name}' is defined {len(defs)} times in {file} {detail}",
            locations=locations,
            suggestion=f"Keep a single definition of {name} in {file}; the last one usually wins",
        ))

    return issues
