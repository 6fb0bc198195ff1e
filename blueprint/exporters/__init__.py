"""Built-in exporters."""

from typing import List

from blueprint.context import BlueprintContext
from blueprint.exporters.base import HasAlias, StepExporter, get_exporter_id
from blueprint.exporters.plugins import ExportInstallPluginSteps, ExportInstallThemeSteps
from blueprint.exporters.settings import (
    ExportSiteOptions,
    ExportTableRows,
    create_settings_exporters,
)


def create_builtin_exporters(context: BlueprintContext) -> List[StepExporter]:
    """Instantiate the exporters every site has."""
    return [
        ExportInstallPluginSteps(context),
        ExportInstallThemeSteps(context),
    ]


__all__ = [
    "StepExporter",
    "HasAlias",
    "get_exporter_id",
    "ExportInstallPluginSteps",
    "ExportInstallThemeSteps",
    "ExportSiteOptions",
    "ExportTableRows",
    "create_builtin_exporters",
    "create_settings_exporters",
]
