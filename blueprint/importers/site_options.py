"""setSiteOptions importer."""

from typing import Any, Dict, Type

from blueprint.importers.base import StepProcessor
from blueprint.results import StepProcessorResult
from blueprint.steps.site_options import SetSiteOptions


class ImportSetSiteOptions(StepProcessor):
    """Writes every option of the step to the site's option store."""

    def process(self, schema: Dict[str, Any]) -> StepProcessorResult:
        result = self.new_result()
        store = self.context.options

        for name, value in schema["options"].items():
            if store.update_option(name, value):
                result.add_info(f"{name} has been updated.")
                continue

            if store.get_option(name) == value:
                result.add_info(
                    f"{name} has not been updated because the current value is already up to date."
                )
            else:
                result.add_error(f"Unable to update {name}.")

        return result

    def get_step_class(self) -> Type[SetSiteOptions]:
        return SetSiteOptions

    def check_step_capabilities(self, schema: Dict[str, Any]) -> bool:
        return self.context.actor_can("manage_options")
