"""runSql importer."""

from typing import Any, Dict, Type

from blueprint.exceptions import ExecutionError, SecurityRejection
from blueprint.importers.base import StepProcessor
from blueprint.logging import get_logger
from blueprint.results import StepProcessorResult
from blueprint.security.sql_validator import SqlStepValidator
from blueprint.steps.run_sql import RunSql

logger = get_logger(__name__)

# Raw statements need all three at once
REQUIRED_CAPABILITIES = ("manage_options", "edit_posts", "edit_users")


class ImportRunSql(StepProcessor):
    """Validates a statement through the security gates, then runs it in a transaction."""

    def process(self, schema: Dict[str, Any]) -> StepProcessorResult:
        result = self.new_result()
        sql = schema["sql"]["contents"].strip()
        name = schema["sql"].get("name", "")

        validator = SqlStepValidator(self.context.table_prefix)
        try:
            validator.validate(sql)
        except SecurityRejection as rejection:
            result.add_error(rejection.message)
            return result

        statements = self.context.statements
        statements.begin()
        try:
            outcome = statements.execute(sql)
        except Exception as e:
            statements.rollback()
            error = ExecutionError(f"Exception executing SQL: {e}", original_error=e)
            logger.debug(f"Statement {name} raised, rolled back: {error.to_dict()}")
            result.add_error(error.message)
            return result

        if outcome.error:
            statements.rollback()
            result.add_error(f"Error executing SQL: {outcome.error}")
        else:
            statements.commit()
            result.add_debug(f"Executed SQL ({name}): Affected {outcome.affected_rows} rows")

        return result

    def get_step_class(self) -> Type[RunSql]:
        return RunSql

    def check_step_capabilities(self, schema: Dict[str, Any]) -> bool:
        return self.context.actor_can_all(*REQUIRED_CAPABILITIES)
