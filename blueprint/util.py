"""
Helpers for rendering table rows as portable data-fixup statements.

Exporters that copy table contents emit one runSql step per row. Identifiers
are validated against a strict pattern and values are rendered as SQL
literals, so the generated text is safe to replay and passes the runSql
security gates.
"""

import json
import math
import re
from typing import Any, Dict

VALID_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

STATEMENT_TYPES = {
    "insert": "INSERT INTO",
    "insert ignore": "INSERT IGNORE INTO",
    "insert or replace": "INSERT OR REPLACE INTO",
    "replace into": "REPLACE INTO",
}


def validate_identifier(identifier: str) -> None:
    """
    Validate a table or column name.

    Raises:
        ValueError: If the identifier is not a plain SQL identifier
    """
    if not isinstance(identifier, str) or not VALID_IDENTIFIER_PATTERN.match(identifier):
        raise ValueError(f"Invalid SQL identifier: {identifier!r}")


def quote_value(value: Any) -> str:
    """Render a Python value as a SQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and not math.isfinite(value):
        # SQL has no literal for inf or nan
        return "NULL"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (dict, list)):
        value = json.dumps(value)

    escaped = str(value).replace("\\", "\\\\").replace("'", "''")
    return f"'{escaped}'"


def array_to_insert_sql(row: Dict[str, Any], table: str, statement_type: str = "insert ignore") -> str:
    """
    Build an insert-style statement for one row.

    Args:
        row: Column name -> value
        table: Target table
        statement_type: One of "insert", "insert ignore", "insert or replace",
            "replace into"

    Returns:
        Statement text ending with a semicolon

    Raises:
        ValueError: On an empty row, unknown statement type or invalid identifier
    """
    if not row:
        raise ValueError("Row cannot be empty")

    keyword = STATEMENT_TYPES.get(statement_type.lower())
    if keyword is None:
        raise ValueError(
            f"Unsupported statement type '{statement_type}'. "
            f"Use one of: {', '.join(STATEMENT_TYPES)}"
        )

    validate_identifier(table)
    for column in row:
        validate_identifier(column)

    columns = ", ".join(row.keys())
    values = ", ".join(quote_value(value) for value in row.values())
    return f"{keyword} {table} ({columns}) VALUES ({values});"
