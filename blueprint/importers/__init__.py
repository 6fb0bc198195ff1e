"""Built-in step processors."""

from typing import List

from blueprint.context import BlueprintContext
from blueprint.importers.base import StepProcessor
from blueprint.importers.plugins import ImportActivatePlugin, ImportInstallPlugin
from blueprint.importers.run_sql import ImportRunSql
from blueprint.importers.site_options import ImportSetSiteOptions
from blueprint.importers.themes import ImportActivateTheme, ImportInstallTheme


def create_builtin_importers(context: BlueprintContext) -> List[StepProcessor]:
    """Instantiate every built-in processor for one run."""
    return [
        ImportInstallPlugin(context),
        ImportInstallTheme(context),
        ImportActivatePlugin(context),
        ImportActivateTheme(context),
        ImportSetSiteOptions(context),
        ImportRunSql(context),
    ]


__all__ = [
    "StepProcessor",
    "ImportInstallPlugin",
    "ImportInstallTheme",
    "ImportActivatePlugin",
    "ImportActivateTheme",
    "ImportSetSiteOptions",
    "ImportRunSql",
    "create_builtin_importers",
]
