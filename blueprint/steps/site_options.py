"""setSiteOptions step."""

from typing import Any, Dict, Optional

from blueprint.steps.base import Step


class SetSiteOptions(Step):
    """Write a set of site options."""

    def __init__(self, options: Dict[str, Any], meta: Optional[Dict[str, Any]] = None):
        super().__init__(meta)
        self.options = dict(options)

    @classmethod
    def get_step_name(cls) -> str:
        return "setSiteOptions"

    @classmethod
    def get_payload_schema(cls) -> Dict[str, Any]:
        return {
            "properties": {"options": {"type": "object"}},
            "required": ["options"],
        }

    def prepare_json_array(self) -> Dict[str, Any]:
        return {"step": self.get_step_name(), "options": dict(self.options)}
