"""Theme importers."""

from typing import Any, Dict, Optional, Type

from blueprint.importers.base import StepProcessor
from blueprint.results import StepProcessorResult
from blueprint.steps.themes import ActivateTheme, InstallTheme


class ImportInstallTheme(StepProcessor):
    """Installs (and optionally activates) a theme from a resource storage."""

    def process(self, schema: Dict[str, Any]) -> StepProcessorResult:
        result = self.new_result()
        slug = schema["themeData"]["slug"]
        resource = schema["themeData"]["resource"]
        activate = schema.get("options", {}).get("activate", False)
        extensions = self.context.extensions

        if slug in extensions.get_themes():
            result.add_info(f"Skipped installing {slug}. It is already installed.")
            folder_name: Optional[str] = slug
        else:
            folder_name = self._install(slug, resource, result)
            if not folder_name:
                return result

        if activate:
            if extensions.get_current_theme() == folder_name:
                result.add_info(f"{slug} is already the active theme.")
            else:
                error = extensions.switch_theme(folder_name)
                if error:
                    result.add_error(f"Failed to activate {slug}: {error}")
                else:
                    result.add_info(f"Switched theme to {slug}.")

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
        folder_name = self.context.extensions.install_theme(package)
        if not folder_name:
            result.add_error(f"Failed to install theme {slug}.")
            return None

        result.add_info(f"Installed {slug}.")
        return folder_name

    def get_step_class(self) -> Type[InstallTheme]:
        return InstallTheme

    def check_step_capabilities(self, schema: Dict[str, Any]) -> bool:
        return self.context.actor_can("install_themes")


class ImportActivateTheme(StepProcessor):
    """Switches the active theme."""

    def process(self, schema: Dict[str, Any]) -> StepProcessorResult:
        result = self.new_result()
        folder_name = schema["themeFolderName"]
        extensions = self.context.extensions

        if folder_name not in extensions.get_themes():
            result.add_error(f"Unable to activate {folder_name}: theme is not installed.")
            return result

        error = extensions.switch_theme(folder_name)
        if error:
            result.add_error(f"Unable to activate {folder_name}: {error}")
        else:
            result.add_info(f"Switched theme to '{folder_name}'.")
        return result

    def get_step_class(self) -> Type[ActivateTheme]:
        return ActivateTheme

    def check_step_capabilities(self, schema: Dict[str, Any]) -> bool:
        return self.context.actor_can("switch_themes")
