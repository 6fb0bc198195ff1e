"""JSON Schema validation of step documents."""

from typing import Any, Dict, List, NamedTuple

from jsonschema import Draft7Validator


class SchemaValidationOutcome(NamedTuple):
    valid: bool
    errors: List[str]


def _format_error(error) -> str:
    location = "/".join(str(part) for part in error.absolute_path)
    if location:
        return f"{location}: {error.message}"
    return error.message


def validate(document: Any, schema: Dict[str, Any]) -> SchemaValidationOutcome:
    """
    Validate a document against a JSON Schema and collect every error.

    Args:
        document: Parsed JSON document
        schema: Draft-07 JSON Schema

    Returns:
        SchemaValidationOutcome with all error messages, in document order
    """
    validator = Draft7Validator(schema)
    errors = sorted(
        validator.iter_errors(document),
        key=lambda e: [str(part) for part in e.absolute_path],
    )
    return SchemaValidationOutcome(not errors, [_format_error(e) for e in errors])
