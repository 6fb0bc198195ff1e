"""Exporters for installed plugins and themes."""

from typing import Any, Callable, Dict, List, Optional

from blueprint.context import BlueprintContext
from blueprint.exporters.base import StepExporter
from blueprint.steps.plugins import InstallPlugin
from blueprint.steps.themes import InstallTheme

ExtensionFilter = Callable[[Dict[str, Dict[str, Any]]], Dict[str, Dict[str, Any]]]


def plugin_slug(plugin_path: str, info: Dict[str, Any]) -> str:
    """Slug of an installed plugin ("akismet/akismet.php" -> "akismet")."""
    if info.get("slug"):
        return info["slug"]
    folder = plugin_path.split("/", 1)[0]
    if folder.endswith(".php"):
        folder = folder[: -len(".php")]
    return folder


class ExportInstallPluginSteps(StepExporter):
    """One installPlugin step per installed plugin."""

    def __init__(self, context: BlueprintContext, resource: str = "wordpress.org/plugins"):
        super().__init__(context)
        self.resource = resource
        self._filter: Optional[ExtensionFilter] = None

    def filter(self, callback: ExtensionFilter) -> None:
        """Narrow the exported plugins; the callback gets and returns {plugin_path: info}."""
        self._filter = callback

    def export(self) -> List[InstallPlugin]:
        extensions = self.context.extensions
        plugins = extensions.get_plugins()
        if self._filter is not None:
            plugins = self._filter(plugins)

        return [
            InstallPlugin(
                plugin_slug(plugin_path, info),
                self.resource,
                {"activate": extensions.is_plugin_active(plugin_path)},
            )
            for plugin_path, info in plugins.items()
        ]

    def get_step_name(self) -> str:
        return InstallPlugin.get_step_name()

    def get_label(self) -> str:
        return "Plugins"

    def get_description(self) -> str:
        return "It includes all the installed plugins and extensions."

    def check_step_capabilities(self) -> bool:
        return self.context.actor_can("activate_plugins")


class ExportInstallThemeSteps(StepExporter):
    """One installTheme step per installed theme."""

    def __init__(self, context: BlueprintContext, resource: str = "wordpress.org/themes"):
        super().__init__(context)
        self.resource = resource
        self._filter: Optional[ExtensionFilter] = None

    def filter(self, callback: ExtensionFilter) -> None:
        """Narrow the exported themes; the callback gets and returns {folder: info}."""
        self._filter = callback

    def export(self) -> List[InstallTheme]:
        extensions = self.context.extensions
        themes = extensions.get_themes()
        if self._filter is not None:
            themes = self._filter(themes)

        current = extensions.get_current_theme()
        return [
            InstallTheme(
                info.get("slug") or folder,
                self.resource,
                {"activate": folder == current},
            )
            for folder, info in themes.items()
        ]

    def get_step_name(self) -> str:
        return InstallTheme.get_step_name()

    def get_label(self) -> str:
        return "Themes"

    def get_description(self) -> str:
        return "It includes all the installed themes."

    def check_step_capabilities(self) -> bool:
        return self.context.actor_can("switch_themes")
