"""Plugin importers."""

from typing import Any, Dict, Optional, Type

from blueprint.importers.base import StepProcessor
from blueprint.logging import get_logger
from blueprint.results import StepProcessorResult
from blueprint.steps.plugins import ActivatePlugin, InstallPlugin

logger = get_logger(__name__)


def find_plugin_path(plugins: Dict[str, Dict[str, Any]], slug: str) -> Optional[str]:
    """Return the installed plugin path for a slug ("akismet" -> "akismet/akismet.php")."""
    for plugin_path in plugins:
        if plugin_path.split("/", 1)[0] == slug or plugin_path == f"{slug}.php":
            return plugin_path
    return None


class ImportInstallPlugin(StepProcessor):
    """Installs (and optionally activates) a plugin from a resource storage."""

    def process(self, schema: Dict[str, Any]) -> StepProcessorResult:
        result = self.new_result()
        slug = schema["pluginData"]["slug"]
        resource = schema["pluginData"]["resource"]
        activate = schema.get("options", {}).get("activate", False)
        extensions = self.context.extensions

        plugin_path = find_plugin_path(extensions.get_plugins(), slug)
        if plugin_path:
            result.add_info(f"Skipped installing {slug}. It is already installed.")
        else:
            plugin_path = self._install(slug, resource, result)
            if not plugin_path:
                return result

        if activate:
            if extensions.is_plugin_active(plugin_path):
                result.add_info(f"{slug} is already active.")
            else:
                error = extensions.activate_plugin(plugin_path)
                if error:
                    result.add_error(f"Failed to activate {slug}: {error}")
                else:
                    result.add_info(f"Activated {slug}.")

        return result

    def _install(self, slug: str, resource: str, result: StepProcessorResult) -> Optional[str]:
        storages = self.context.storages
        if not storages.is_supported(resource):
            result.add_error(f"Invalid resource type for {slug}: {resource}")
            return None

        package = storages.download(slug, resource)
        if not package:
            result.add_error(f"Unable to download {slug} with {resource} resource type.")
            return None

        result.add_debug(f"Downloaded {slug} to {package}")
        plugin_path = self.context.extensions.install_plugin(package)
        if not plugin_path:
            result.add_error(f"Failed to install {slug}.")
            return None

        result.add_info(f"Installed {slug}.")
        return plugin_path

    def get_step_class(self) -> Type[InstallPlugin]:
        return InstallPlugin

    def check_step_capabilities(self, schema: Dict[str, Any]) -> bool:
        return self.context.actor_can("install_plugins")


class ImportActivatePlugin(StepProcessor):
    """Activates an installed plugin."""

    def process(self, schema: Dict[str, Any]) -> StepProcessorResult:
        result = self.new_result()
        plugin_path = schema["pluginPath"]
        plugin_name = schema.get("pluginName") or plugin_path
        extensions = self.context.extensions

        if plugin_path not in extensions.get_plugins():
            result.add_error(f"Unable to activate {plugin_name}: plugin is not installed.")
            return result

        error = extensions.activate_plugin(plugin_path)
        if error:
            result.add_error(f"Unable to activate {plugin_name}: {error}")
        else:
            result.add_info(f"Activated {plugin_name}.")
        return result

    def get_step_class(self) -> Type[ActivatePlugin]:
        return ActivatePlugin

    def check_step_capabilities(self, schema: Dict[str, Any]) -> bool:
        return self.context.actor_can("activate_plugins")
