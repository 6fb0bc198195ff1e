"""runSql step."""

from typing import Any, Dict, Optional

from blueprint.steps.base import Step


class RunSql(Step):
    """Run one data-fixup statement (INSERT, UPDATE or REPLACE INTO)."""

    def __init__(
        self,
        sql: str,
        name: str = "schema.sql",
        meta: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(meta)
        self.sql = sql
        self.name = name

    @classmethod
    def get_step_name(cls) -> str:
        return "runSql"

    @classmethod
    def get_payload_schema(cls) -> Dict[str, Any]:
        return {
            "properties": {
                "sql": {
                    "type": "object",
                    "properties": {
                        "resource": {"type": "string", "enum": ["literal"]},
                        "name": {"type": "string"},
                        "contents": {"type": "string", "minLength": 1},
                    },
                    "required": ["resource", "name", "contents"],
                },
            },
            "required": ["sql"],
        }

    def prepare_json_array(self) -> Dict[str, Any]:
        return {
            "step": self.get_step_name(),
            "sql": {"resource": "literal", "name": self.name, "contents": self.sql},
        }
