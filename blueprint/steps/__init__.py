"""Built-in step definitions."""

from blueprint.steps.base import Step
from blueprint.steps.plugins import ActivatePlugin, InstallPlugin
from blueprint.steps.run_sql import RunSql
from blueprint.steps.site_options import SetSiteOptions
from blueprint.steps.themes import ActivateTheme, InstallTheme

BUILTIN_STEPS = [
    InstallPlugin,
    InstallTheme,
    ActivatePlugin,
    ActivateTheme,
    SetSiteOptions,
    RunSql,
]

__all__ = [
    "Step",
    "InstallPlugin",
    "InstallTheme",
    "ActivatePlugin",
    "ActivateTheme",
    "SetSiteOptions",
    "RunSql",
    "BUILTIN_STEPS",
]
