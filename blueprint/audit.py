"""Audit trail for export and import runs.

Every lifecycle event goes to the "blueprint.audit" logger with a structured
context dict attached to the record (``record.context``) so handlers that
care can pick it up, and rendered as key=value pairs for everyone else.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from blueprint.logging import get_logger, resolve_level
from blueprint.results import StepProcessorResult


def _describe(component: Any) -> str:
    return type(component).__name__


class BlueprintLogger:
    """Leveled, structured sink for pipeline lifecycle events."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or get_logger("blueprint.audit")

    def log(self, level: Any, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        context = context or {}
        if context:
            rendered = ", ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} ({rendered})"
        self._logger.log(resolve_level(level), message, extra={"context": context})

    def start_export(self, exporters: Iterable[Any]) -> None:
        names = [_describe(exporter) for exporter in exporters]
        self.log("info", "Starting export", {"exporters": ", ".join(names)})

    def complete_export(self, exporters: Iterable[Any], step_count: int = 0) -> None:
        names = [_describe(exporter) for exporter in exporters]
        self.log(
            "info",
            "Export completed",
            {"exporters": ", ".join(names), "steps": step_count},
        )

    def export_failed(self, exporter: Any, error: Exception) -> None:
        self.log(
            "error",
            f"Export failed: {error}",
            {"exporter": _describe(exporter), "error_type": type(error).__name__},
        )

    def start_import(self, step_name: str, importer: Any) -> None:
        self.log(
            "info",
            f"Starting import of {step_name}",
            {"importer": _describe(importer)},
        )

    def complete_import(self, step_name: str, result: StepProcessorResult) -> None:
        self.log(
            "info",
            f"Import of {step_name} completed",
            {"messages": self._messages(result)},
        )

    def import_failed(self, step_name: str, result: StepProcessorResult) -> None:
        self.log(
            "error",
            f"Import of {step_name} failed",
            {"messages": self._messages(result)},
        )

    @staticmethod
    def _messages(result: StepProcessorResult) -> str:
        return "; ".join(
            f"[{message.level.value}] {message.text}" for message in result.get_messages()
        )
