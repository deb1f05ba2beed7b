"""Pydantic models for env-auditor."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Severity(str, Enum):
    """Severity levels for issues, ordered info < warning < error."""

    info = "info"
    warning = "warning"
    error = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Map a config string to a severity; anything unrecognised is info."""
        lowered = (value or "").strip().lower()
        if lowered == "error":
            return cls.error
        if lowered == "warning":
            return cls.warning
        return cls.info


_SEVERITY_RANK = {
    Severity.info: 0,
    Severity.warning: 1,
    Severity.error: 2,
}


class Dialect(str, Enum):
    """Source-language conventions for reading environment variables."""

    javascript = "javascript"
    typescript = "typescript"
    python = "python"
    rust = "rust"
    go = "go"
    ruby = "ruby"
    php = "php"
    java = "java"
    csharp = "csharp"

    @property
    def display_name(self) -> str:
        return _DIALECT_DISPLAY_NAMES[self]


_DIALECT_DISPLAY_NAMES = {
    Dialect.javascript: "JavaScript",
    Dialect.typescript: "TypeScript",
    Dialect.python: "Python",
    Dialect.rust: "Rust",
    Dialect.go: "Go",
    Dialect.ruby: "Ruby",
    Dialect.php: "PHP",
    Dialect.java: "Java",
    Dialect.csharp: "C#",
}


class IssueKind(str, Enum):
    """Categories of issues the analyzer can report."""

    missing_variable = "missing_variable"
    unused_variable = "unused_variable"
    inconsistent_naming = "inconsistent_naming"
    duplicate_definition = "duplicate_definition"

    @property
    def label(self) -> str:
        return _ISSUE_KIND_LABELS[self]


_ISSUE_KIND_LABELS = {
    IssueKind.missing_variable: "Missing env var",
    IssueKind.unused_variable: "Unused env var",
    IssueKind.inconsistent_naming: "Inconsistent naming",
    IssueKind.duplicate_definition: "Duplicate definition",
}


class FileLocation(BaseModel):
    """A position in a scanned file. Column is for display only."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(description="Path of the file")
    line: Optional[int] = Field(default=None, description="1-based line number")
    column: Optional[int] = Field(default=None, description="1-based column number")

    def sort_key(self) -> tuple[str, int, int]:
        return (self.file, self.line or 0, self.column or 0)

    def dedup_key(self) -> tuple[str, int]:
        return (self.file, self.line or 0)

    def __str__(self) -> str:
        text = self.file
        if self.line is not None:
            text += f":{self.line}"
            if self.column is not None:
                text += f":{self.column}"
        return text


class VariableDefinition(BaseModel):
    """A KEY=VALUE line parsed from an environment file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Variable name")
    value: Optional[str] = Field(default=None, description="Value with surrounding quotes removed")
    location: FileLocation = Field(description="Env file and line of the definition")


class VariableUsage(BaseModel):
    """A read of an environment variable recognised in source code."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Variable name")
    location: FileLocation = Field(description="Source file, line and column of the name")
    dialect: Dialect = Field(description="Dialect whose idiom matched")
    context: Optional[str] = Field(default=None, description="The stripped source line")


class NamingRule(BaseModel):
    """Maps alternative variable names to a preferred one."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Rule identifier, e.g. 'database-url'")
    description: Optional[str] = Field(default=None)
    alternative_names: list[str] = Field(default_factory=list)
    preferred_name: str
    severity: Severity = Severity.warning

    @field_validator("alternative_names")
    @classmethod
    def _unique_alternatives(cls, value: list[str]) -> list[str]:
        # dict.fromkeys keeps first-seen order
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def _preferred_not_alternative(self) -> "NamingRule":
        if self.preferred_name in self.alternative_names:
            raise ValueError(
                f"Rule '{self.id}' lists its preferred name "
                f"'{self.preferred_name}' as an alternative"
            )
        return self


class Issue(BaseModel):
    """A finding produced by cross-referencing definitions and usages."""

    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    severity: Severity
    variable_name: str
    message: str
    locations: list[FileLocation] = Field(default_factory=list)
    suggestion: Optional[str] = Field(default=None)


class ScanSummary(BaseModel):
    """Counts derived from one scan."""

    files_scanned: int = Field(default=0, description="Source files scanned")
    env_files_found: int = Field(default=0, description="Env files parsed")
    vars_defined: int = Field(default=0, description="Distinct defined variable names")
    vars_used: int = Field(default=0, description="Distinct used variable names")
    total_issues: int = Field(default=0)
    errors: int = Field(default=0)
    warnings: int = Field(default=0)
    infos: int = Field(default=0)

    @classmethod
    def from_facts(
        cls,
        issues: list[Issue],
        definitions: list[VariableDefinition],
        usages: list[VariableUsage],
        files_scanned: int = 0,
        env_files_found: int = 0,
    ) -> "ScanSummary":
        return cls(
            files_scanned=files_scanned,
            env_files_found=env_files_found,
            vars_defined=len({d.name for d in definitions}),
            vars_used=len({u.name for u in usages}),
            total_issues=len(issues),
            errors=sum(1 for i in issues if i.severity == Severity.error),
            warnings=sum(1 for i in issues if i.severity == Severity.warning),
            infos=sum(1 for i in issues if i.severity == Severity.info),
        )


class ScanReport(BaseModel):
    """Full scan report output."""

    scan_id: str = Field(description="Unique identifier for this scan")
    summary: ScanSummary = Field(default_factory=ScanSummary)
    issues: list[Issue] = Field(default_factory=list, description="Issues, errors first")
    definitions: list[VariableDefinition] = Field(default_factory=list)
    usages: list[VariableUsage] = Field(default_factory=list)
    scan_duration_ms: int = Field(default=0)


class CheckResult(BaseModel):
    """A scan judged against a failure threshold."""

    passed: bool
    fail_on: Severity
    failing_issues: int = Field(default=0, description="Issues at or above fail_on")
    report: ScanReport


class NamedLocations(BaseModel):
    """A variable name and every place it was seen."""

    name: str
    locations: list[FileLocation] = Field(default_factory=list)


class VariableListing(BaseModel):
    """Distinct defined and used variable names."""

    defined: list[NamedLocations] = Field(default_factory=list)
    used: list[NamedLocations] = Field(default_factory=list)


class ValueDifference(BaseModel):
    """A variable present in both compared files with different values."""

    name: str
    value1: Optional[str] = None
    value2: Optional[str] = None


class EnvComparison(BaseModel):
    """Result of comparing two env files by variable name."""

    file1: str
    file2: str
    only_in_file1: list[str] = Field(default_factory=list)
    only_in_file2: list[str] = Field(default_factory=list)
    in_both: list[str] = Field(default_factory=list)
    differing_values: list[ValueDifference] = Field(
        default_factory=list,
        description="Only populated when values were requested",
    )


class ScanRequest(BaseModel):
    """Request body for scanning a local project or a remote repository."""

    path: Optional[str] = Field(default=None, description="Local project directory to scan")
    repo_url: Optional[str] = Field(default=None, description="URL of a git repository to clone and scan")
    config_path: Optional[str] = Field(default=None, description="Config file (default: <project>/.env-audit.toml)")
    env_files: list[str] = Field(default_factory=list, description="Additional env files; these must exist")
    ignore: list[str] = Field(default_factory=list, description="Additional naming ignore regexes")
    languages: Optional[list[str]] = Field(default=None, description="Languages to scan (default: all)")
    checks: Optional[list[str]] = Field(
        default=None,
        description="Analyses to run: missing, unused, naming, duplicates (default: from config)",
    )
    min_severity: Optional[Severity] = Field(default=None, description="Minimum severity to report")


class ListRequest(BaseModel):
    """Request body for listing defined and used variables."""

    path: str = Field(description="Local project directory")
    config_path: Optional[str] = Field(default=None)
    languages: Optional[list[str]] = Field(default=None)


class CompareRequest(BaseModel):
    """Request body for comparing two env files."""

    file1: str = Field(description="First env file")
    file2: str = Field(description="Second env file")
    show_values: bool = Field(default=False, description="Include differing values in the result")
    base_path: Optional[str] = Field(default=None, description="Directory relative file paths resolve against")
