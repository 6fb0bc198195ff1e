"""
SQL statement gates for runSql steps.

A runSql step carries raw statement text, so every statement passes through
five ordered gates before it may reach the database:

1. statement type allow-list (INSERT, UPDATE, REPLACE INTO)
2. dangerous keywords hidden in comments, and executable comments
3. classic injection signatures
4. protected tables (users, usermeta)
5. role and capability rows in the options table

The gates are plain pattern inspections of the text. They hold no state, so
the same statement always gets the same verdict.
"""

import re
from typing import List, Optional, Pattern

from blueprint.exceptions import SecurityRejection
from blueprint.logging import get_logger

logger = get_logger(__name__)


class SqlStepValidator:
    """Validator for runSql statements."""

    ALLOWED_QUERY_TYPES = ("INSERT", "UPDATE", "REPLACE INTO")

    # Keywords that must never show up inside a comment
    DANGEROUS_COMMANDS = [
        "DELETE",
        "DROP",
        "ALTER",
        "CREATE",
        "TRUNCATE",
        "GRANT",
        "REVOKE",
        "EXEC",
        "EXECUTE",
        "CALL",
        "INTO OUTFILE",
        "INTO DUMPFILE",
        "LOAD_FILE",
        "LOAD DATA",
        "BENCHMARK",
        "SLEEP",
        "INFORMATION_SCHEMA",
        r"USER\(",
        r"DATABASE\(",
        r"SCHEMA\(",
    ]

    _DANGEROUS = "|".join(DANGEROUS_COMMANDS)

    COMMENT_PATTERNS: List[Pattern] = [
        # -- comments
        re.compile(r"--.*?(" + _DANGEROUS + ")", re.IGNORECASE),
        # # comments
        re.compile(r"#.*?(" + _DANGEROUS + ")", re.IGNORECASE),
        # /* ... */ comments, possibly spanning lines
        re.compile(r"/\*.*?(" + _DANGEROUS + r").*?\*/", re.IGNORECASE | re.DOTALL),
        # /*!NNNNN ... */ comments are executed by MySQL
        re.compile(r"/\*![0-9]*.*?\*/", re.DOTALL),
    ]

    INJECTION_PATTERNS: List[Pattern] = [
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"UNION\s+(?:ALL\s+)?SELECT",
            r"OR\s+1\s*=\s*1",
            r"AND\s+0\s*=\s*0",
            r";\s*--",
            r"SLEEP\s*\(",
            r"BENCHMARK\s*\(",
            r"LOAD_FILE\s*\(",
            r"INTO\s+OUTFILE",
            r"INTO\s+DUMPFILE",
            r"CREATE\s+(?:TEMPORARY\s+)?TABLE",
            r"DROP\s+TABLE",
            r"ALTER\s+TABLE",
            r"INFORMATION_SCHEMA",
            r"EXEC\s*\(",
            r"SCHEMA_NAME",
            r"DATABASE\(\)",
            r"CHR\s*\(",
            r"CHAR\s*\(",
            r"FROM\s+mysql\.",
            r"FROM\s+information_schema\.",
        )
    ]

    # Option rows that hold roles and capabilities
    CAPABILITY_OPTION_PATTERNS = [
        "user_roles",
        "capabilities",
        "wp_user_",
        "role_",
        "administrator",
    ]

    def __init__(self, table_prefix: str = "wp_"):
        """
        Initialize the validator.

        Args:
            table_prefix: Prefix of the site's tables, used to name the
                protected tables and the options table
        """
        self.table_prefix = table_prefix

    @property
    def protected_tables(self) -> List[str]:
        return [f"{self.table_prefix}users", f"{self.table_prefix}usermeta"]

    @property
    def options_table(self) -> str:
        return f"{self.table_prefix}options"

    @classmethod
    def is_allowed_query_type(cls, sql: str) -> bool:
        """Check that the statement starts with an allowed statement type."""
        normalized = sql.strip().upper()
        return any(normalized.startswith(query_type) for query_type in cls.ALLOWED_QUERY_TYPES)

    @classmethod
    def contains_suspicious_comments(cls, sql: str) -> bool:
        """Check for comments that hide dangerous commands."""
        # Cheap exit when there is no comment marker at all
        if "--" not in sql and "/*" not in sql and "#" not in sql:
            return False

        return any(pattern.search(sql) for pattern in cls.COMMENT_PATTERNS)

    @classmethod
    def contains_injection_patterns(cls, sql: str) -> bool:
        """Check for common SQL injection signatures."""
        return any(pattern.search(sql) for pattern in cls.INJECTION_PATTERNS)

    def affects_protected_tables(self, sql: str) -> bool:
        """Check whether the statement names the users or usermeta table."""
        for table in self.protected_tables:
            if re.search(r"\b" + re.escape(table) + r"\b", sql, re.IGNORECASE):
                return True
        return False

    def affects_user_capabilities(self, sql: str) -> bool:
        """Check whether an options-table statement touches role or capability rows."""
        lowered = sql.lower()
        if self.options_table.lower() not in lowered:
            return False

        return any(pattern in lowered for pattern in self.CAPABILITY_OPTION_PATTERNS)

    def find_violation(self, sql: str) -> Optional[SecurityRejection]:
        """
        Run all gates in order and return the first violation.

        Args:
            sql: Statement text

        Returns:
            SecurityRejection describing the gate that fired, or None
        """
        sql = sql.strip()

        if not self.is_allowed_query_type(sql):
            return SecurityRejection(
                "statement_type",
                f"Only {', '.join(self.ALLOWED_QUERY_TYPES)} queries are allowed.",
            )

        if self.contains_suspicious_comments(sql):
            return SecurityRejection(
                "suspicious_comment",
                "SQL query contains suspicious comment patterns.",
            )

        if self.contains_injection_patterns(sql):
            return SecurityRejection(
                "injection_pattern",
                "SQL query contains potential injection patterns.",
            )

        if self.affects_protected_tables(sql):
            return SecurityRejection(
                "protected_table",
                "Modifications to admin users or roles are not allowed.",
            )

        if self.affects_user_capabilities(sql):
            return SecurityRejection(
                "capability_escalation",
                "Modifications to user roles or capabilities are not allowed.",
            )

        return None

    def validate(self, sql: str) -> None:
        """
        Validate a statement and raise on the first violation.

        Raises:
            SecurityRejection: If any gate fires
        """
        violation = self.find_violation(sql)
        if violation is not None:
            logger.warning(f"Rejected SQL statement at gate '{violation.gate}'")
            raise violation


def validate_statement(sql: str, table_prefix: str = "wp_") -> None:
    """
    Validate a runSql statement and raise an exception if it is rejected.

    Args:
        sql: The statement to validate
        table_prefix: Prefix of the site's tables

    Raises:
        SecurityRejection: If the statement is rejected
    """
    SqlStepValidator(table_prefix).validate(sql)
