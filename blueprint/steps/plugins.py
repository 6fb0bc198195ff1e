"""Plugin steps."""

from typing import Any, Dict, Optional

from blueprint.steps.base import Step

RESOURCE_DATA_SCHEMA = {
    "type": "object",
    "properties": {
        "resource": {"type": "string", "minLength": 1},
        "slug": {"type": "string", "minLength": 1},
    },
    "required": ["resource", "slug"],
}


class InstallPlugin(Step):
    """Install a plugin package resolved through a resource storage."""

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
        return "installPlugin"

    @classmethod
    def get_payload_schema(cls) -> Dict[str, Any]:
        return {
            "properties": {
                "pluginData": RESOURCE_DATA_SCHEMA,
                "options": {
                    "type": "object",
                    "properties": {"activate": {"type": "boolean"}},
                },
            },
            "required": ["pluginData"],
        }

    def prepare_json_array(self) -> Dict[str, Any]:
        document = {
            "step": self.get_step_name(),
            "pluginData": {"resource": self.resource, "slug": self.slug},
        }
        if self.options:
            document["options"] = dict(self.options)
        return document


class ActivatePlugin(Step):
    """Activate an already installed plugin."""

    def __init__(
        self,
        plugin_path: str,
        plugin_name: str = "",
        meta: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(meta)
        self.plugin_path = plugin_path
        self.plugin_name = plugin_name

    @classmethod
    def get_step_name(cls) -> str:
        return "activatePlugin"

    @classmethod
    def get_payload_schema(cls) -> Dict[str, Any]:
        return {
            "properties": {
                "pluginPath": {"type": "string", "minLength": 1},
                "pluginName": {"type": "string"},
            },
            "required": ["pluginPath"],
        }

    def prepare_json_array(self) -> Dict[str, Any]:
        document = {"step": self.get_step_name(), "pluginPath": self.plugin_path}
        if self.plugin_name:
            document["pluginName"] = self.plugin_name
        return document
