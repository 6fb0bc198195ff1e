"""Security gates for raw statement steps."""

from blueprint.security.sql_validator import SqlStepValidator, validate_statement

__all__ = ["SqlStepValidator", "validate_statement"]
