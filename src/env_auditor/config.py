"""Configuration loading for env-auditor (``.env-audit.toml``)."""

import logging
import tomllib
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .models import NamingRule, Severity

logger = logging.getLogger(__name__)


CONFIG_FILE_NAME = ".env-audit.toml"


class ConfigError(ValueError):
    """The configuration file could not be read or is invalid."""


def _default_env_files() -> list[str]:
    return [".env", ".env.local", ".env.example"]


def _default_exclude() -> list[str]:
    return [
        "**/node_modules/**",
        "**/target/**",
        "**/vendor/**",
        "**/.git/**",
        "**/dist/**",
        "**/build/**",
        "**/__pycache__/**",
        "**/venv/**",
        "**/.venv/**",
    ]


class ScanConfig(BaseModel):
    """Which files to scan."""

    env_files: list[str] = Field(
        default_factory=_default_env_files,
        description="Env files to parse, relative to the project root",
    )
    exclude: list[str] = Field(
        default_factory=_default_exclude,
        description="Glob patterns excluded from the source scan",
    )
    languages: Optional[list[str]] = Field(
        default=None,
        description="Languages to scan (None = all supported)",
    )
    respect_gitignore: bool = Field(
        default=True,
        description="Skip source files ignored by .gitignore, .git/info/exclude or the global excludes file",
    )


class CustomRule(BaseModel):
    """A naming rule as written in the config file."""

    name: str
    description: Optional[str] = None
    alternatives: list[str] = Field(default_factory=list)
    preferred: str
    severity: str = "warning"

    def to_naming_rule(self) -> NamingRule:
        return NamingRule(
            id=self.name,
            description=self.description,
            alternative_names=self.alternatives,
            preferred_name=self.preferred,
            severity=Severity.parse(self.severity),
        )


class NamingConfig(BaseModel):
    """Naming convention checks."""

    builtin_rules: bool = True
    custom_rules: list[CustomRule] = Field(default_factory=list)
    ignore_patterns: list[str] = Field(
        default_factory=list,
        description="Regexes; alternative names matching any of them are not reported",
    )


class ChecksConfig(BaseModel):
    """Which analyses run by default."""

    missing: bool = True
    unused: bool = True
    naming: bool = True
    duplicates: bool = False


class OutputConfig(BaseModel):
    """Report output defaults."""

    format: Literal["json", "markdown"] = "json"
    min_severity: Severity = Severity.info

    @field_validator("min_severity", mode="before")
    @classmethod
    def _parse_severity(cls, value):
        if isinstance(value, str):
            return Severity.parse(value)
        return value


class AuditConfig(BaseModel):
    """Top-level configuration."""

    scan: ScanConfig = Field(default_factory=ScanConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    checks: ChecksConfig = Field(default_factory=ChecksConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: str | Path) -> AuditConfig:
    """Load configuration from a TOML file. A missing file yields defaults.

    Raises:
        ConfigError: If the file exists but cannot be read, parsed or validated.
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"No config file at {path}, using defaults")
        return AuditConfig()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (IOError, OSError) as e:
        raise ConfigError(f"Failed to read config file: {path} ({e})") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config file: {path} ({e})") from e

    try:
        config = AuditConfig.model_validate(data)
        # Surface bad custom rules here rather than mid-scan
        for custom in config.naming.custom_rules:
            custom.to_naming_rule()
    except ValidationError as e:
        raise ConfigError(f"Invalid config file: {path} ({e})") from e

    return config


def load_project_config(project_path: str | Path, config_path: str | Path | None = None) -> AuditConfig:
    """Load the config for a project: an explicit path, else the project's own file."""
    if config_path is not None:
        return load_config(config_path)
    return load_config(Path(project_path) / CONFIG_FILE_NAME)


DEFAULT_CONFIG_TEXT = """\
# env-audit configuration file

[scan]
# Env files to parse (relative to project root)
env_files = [".env", ".env.local", ".env.example"]

# Glob patterns to exclude from scan
exclude = [
    "**/node_modules/**",
    "**/target/**",
    "**/vendor/**",
    "**/.git/**",
    "**/dist/**",
    "**/build/**",
]

# Languages to scan (comment out for all supported languages)
# languages = ["javascript", "typescript", "python", "rust", "go", "ruby", "php", "java", "csharp"]

# Skip source files matched by .gitignore, .git/info/exclude and the global excludes file
respect_gitignore = true

[naming]
# Use built-in naming conflict rules
builtin_rules = true

# Patterns to ignore (regex) - vars matching these won't trigger naming issues
ignore_patterns = ["^_", "^INTERNAL_"]

# Custom naming rules
# [[naming.custom_rules]]
# name = "database-url"
# description = "Database connection URL naming"
# alternatives = ["DB_URL", "DB_CONNECTION"]
# preferred = "DATABASE_URL"
# severity = "warning"

[checks]
missing = true
unused = true
naming = true
# Report names defined more than once in the same env file
duplicates = false

[output]
# Report format: "json" or "markdown"
format = "json"

# Minimum severity to report: "error", "warning", "info"
min_severity = "info"
"""


def generate_default_config() -> str:
    """Return the text of a commented default config file."""
    return DEFAULT_CONFIG_TEXT
