"""Theme steps."""

from typing import Any, Dict, Optional

from blueprint.steps.base import Step
from blueprint.steps.plugins import RESOURCE_DATA_SCHEMA


class InstallTheme(Step):
    """Install a theme package resolved through a resource storage."""

    def __init__(
        self,
        slug: str,
        resource: str,
        options: Optional[Dict[str, Any]] = None,
        meta: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(meta)
        self.slug = slug
        self.resource = resource
        self.options = dict(options or {})

    @classmethod
    def get_step_name(cls) -> str:
        return "installTheme"

    @classmethod
    def get_payload_schema(cls) -> Dict[str, Any]:
        return {
            "properties": {
                "themeData": RESOURCE_DATA_SCHEMA,
                "options": {
                    "type": "object",
                    "properties": {"activate": {"type": "boolean"}},
                },
            },
            "required": ["themeData"],
        }

    def prepare_json_array(self) -> Dict[str, Any]:
        document = {
            "step": self.get_step_name(),
            "themeData": {"resource": self.resource, "slug": self.slug},
        }
        if self.options:
            document["options"] = dict(self.options)
        return document


class ActivateTheme(Step):
    """Switch the active theme."""

    def __init__(self, theme_folder_name: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(meta)
        self.theme_folder_name = theme_folder_name

    @classmethod
    def get_step_name(cls) -> str:
        return "activateTheme"

    @classmethod
    def get_payload_schema(cls) -> Dict[str, Any]:
        return {
            "properties": {"themeFolderName": {"type": "string", "minLength": 1}},
            "required": ["themeFolderName"],
        }

    def prepare_json_array(self) -> Dict[str, Any]:
        return {"step": self.get_step_name(), "themeFolderName": self.theme_folder_name}
