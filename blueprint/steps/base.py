"""Base class for step definitions.

A step is one immutable unit of configuration change. Each step class knows
its wire name, the JSON Schema its documents must satisfy and how to render
itself as a wire document ({"step": name, ...payload}).
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

META_SCHEMA = {
    "type": "object",
    "properties": {
        "alias": {"type": "string"},
    },
}


class Step(ABC):
    """A single blueprint step."""

    def __init__(self, meta: Optional[Dict[str, Any]] = None):
        self._meta = dict(meta or {})

    @classmethod
    @abstractmethod
    def get_step_name(cls) -> str:
        """Wire name of the step ("installPlugin", "runSql", ...)."""

    @classmethod
    @abstractmethod
    def get_payload_schema(cls) -> Dict[str, Any]:
        """JSON Schema fragment: properties and required keys of the payload."""

    @abstractmethod
    def prepare_json_array(self) -> Dict[str, Any]:
        """Render the step without meta data."""

    @classmethod
    def get_schema(cls) -> Dict[str, Any]:
        """Full draft-07 JSON Schema for a document of this step."""
        payload = cls.get_payload_schema()
        properties = {
            "step": {"type": "string", "const": cls.get_step_name()},
            "meta": META_SCHEMA,
        }
        properties.update(copy.deepcopy(payload.get("properties", {})))
        return {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "properties": properties,
            "required": ["step"] + list(payload.get("required", [])),
        }

    def set_meta_values(self, meta: Dict[str, Any]) -> None:
        self._meta.update(meta)

    def get_meta_values(self) -> Dict[str, Any]:
        return dict(self._meta)

    def get_json_array(self) -> Dict[str, Any]:
        document = self.prepare_json_array()
        if self._meta:
            document["meta"] = dict(self._meta)
        return document

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Step) and self.get_json_array() == other.get_json_array()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.get_json_array()!r})"
