"""Naming convention rules: the built-in table plus rules from configuration."""

from .config import NamingConfig
from .models import NamingRule, Severity


BUILTIN_RULES: tuple[NamingRule, ...] = (
    NamingRule(
        id="database-url",
        description="Database connection URL",
        alternative_names=["DB_URL", "DB_CONNECTION", "DB_HOST"],
        preferred_name="DATABASE_URL",
        severity=Severity.warning,
    ),
    NamingRule(
        id="redis-url",
        description="Redis connection URL",
        alternative_names=["REDIS_HOST", "REDIS_CONNECTION"],
        preferred_name="REDIS_URL",
        severity=Severity.warning,
    ),
    NamingRule(
        id="api-key",
        description="API key naming",
        alternative_names=["APIKEY", "API_SECRET"],
        preferred_name="API_KEY",
        severity=Severity.info,
    ),
    NamingRule(
        id="secret-key",
        description="Secret key naming",
        alternative_names=["SECRET", "APP_SECRET"],
        preferred_name="SECRET_KEY",
        severity=Severity.info,
    ),
    NamingRule(
        id="port",
        description="Application port",
        alternative_names=["APP_PORT", "SERVER_PORT", "HTTP_PORT"],
        preferred_name="PORT",
        severity=Severity.info,
    ),
    NamingRule(
        id="log-level",
        description="Logging level",
        alternative_names=["LOGLEVEL", "LOGGING_LEVEL"],
        preferred_name="LOG_LEVEL",
        severity=Severity.info,
    ),
    NamingRule(
        id="aws-region",
        description="AWS region",
        alternative_names=["REGION", "AMAZON_REGION"],
        preferred_name="AWS_REGION",
        severity=Severity.info,
    ),
    NamingRule(
        id="jwt-secret",
        description="JWT signing secret",
        alternative_names=["JWT_KEY", "TOKEN_SECRET"],
        preferred_name="JWT_SECRET",
        severity=Severity.info,
    ),
)


def get_all_rules(naming: NamingConfig) -> list[NamingRule]:
    """Built-in rules (when enabled) followed by custom rules from config."""
    rules: list[NamingRule] = []
    if naming.builtin_rules:
        rules.extend(BUILTIN_RULES)
    rules.extend(custom.to_naming_rule() for custom in naming.custom_rules)
    return rules
