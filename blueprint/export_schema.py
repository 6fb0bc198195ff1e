"""Export pipeline.

Collects exporters, narrows them to the requested step names, checks that the
actor may run every one of them, then runs them in order and gathers their
steps into one schema document. Export is all-or-nothing: a capability
failure or an exporter exception aborts the whole export and no partial
document is returned.
"""

import re
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional

from blueprint.context import BlueprintContext
from blueprint.exceptions import AuthorizationError, ValidationError
from blueprint.exporters import create_builtin_exporters
from blueprint.exporters.base import HasAlias, StepExporter, get_exporter_id
from blueprint.logging import get_logger
from blueprint.steps.base import Step

logger = get_logger(__name__)

# Root-relative path only: "/" or "/something", never "//host" or a full URL
LANDING_PAGE_PATTERN = re.compile(r"^/$|^/[^/].*")

ExporterFilter = Callable[[List[Any]], List[Any]]
BeforeExportCallback = Callable[[StepExporter], None]


class ExportSchema:
    """Builds a schema document from the registered exporters."""

    def __init__(
        self,
        context: BlueprintContext,
        exporters: Optional[Iterable[StepExporter]] = None,
        landing_page: str = "/",
    ):
        """
        Initialize the export pipeline.

        Args:
            context: Services for this run
            exporters: Externally supplied exporters, run before the built-in ones
            landing_page: Default landing page, may be replaced by a landing
                page filter
        """
        self.context = context
        self.exporters = list(exporters or [])
        self.landing_page = landing_page
        self._landing_page_filters: List[Callable[[str], str]] = []
        self._exporter_filters: List[ExporterFilter] = []
        self._before_export: Dict[str, List[BeforeExportCallback]] = defaultdict(list)

    def filter_landing_page(self, callback: Callable[[str], str]) -> None:
        """Register a callback that may replace the landing page."""
        self._landing_page_filters.append(callback)

    def filter_exporters(self, callback: ExporterFilter) -> None:
        """Register a callback that may add, remove or replace exporters."""
        self._exporter_filters.append(callback)

    def on_before_export(self, step_name: str, callback: BeforeExportCallback) -> None:
        """
        Register a callback fired right before an exporter runs.

        Args:
            step_name: Step name or alias of the exporter to intercept
            callback: Receives the exporter and may reconfigure it, e.g. call
                ExportInstallPluginSteps.filter()
        """
        self._before_export[step_name].append(callback)

    def get_landing_page(self) -> str:
        """
        Resolve the landing page through the registered filters.

        Raises:
            ValidationError: If the result is not a root-relative path
        """
        landing_page = self.landing_page
        for callback in self._landing_page_filters:
            landing_page = callback(landing_page)

        if not isinstance(landing_page, str) or not LANDING_PAGE_PATTERN.match(landing_page):
            raise ValidationError(
                f"Invalid landing page: {landing_page!r}. "
                "It must be a path relative to the site root, such as /wp-admin/",
                context={"landing_page": landing_page},
            )
        return landing_page

    def get_exporters(self) -> List[StepExporter]:
        """External and built-in exporters after filtering, keeping only real exporters."""
        candidates: List[Any] = self.exporters + create_builtin_exporters(self.context)
        for callback in self._exporter_filters:
            candidates = list(callback(candidates))

        exporters = []
        for candidate in candidates:
            if isinstance(candidate, StepExporter):
                exporters.append(candidate)
            else:
                logger.warning(f"Ignoring {type(candidate).__name__}: not a StepExporter")
        return exporters

    def get_step_groups(self) -> List[Dict[str, str]]:
        """Exporter ids, labels and descriptions for presentation."""
        return [
            {
                "id": get_exporter_id(exporter),
                "label": exporter.get_label(),
                "description": exporter.get_description(),
            }
            for exporter in self.get_exporters()
        ]

    def export(self, steps_to_export: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Run the export.

        Args:
            steps_to_export: Step names or aliases to include. Empty means all;
                names that match no exporter are ignored.

        Returns:
            {"landingPage": ..., "steps": [step documents]}

        Raises:
            ValidationError: Invalid landing page or an exporter raised
            AuthorizationError: The actor may not run one of the exporters
        """
        landing_page = self.get_landing_page()
        exporters = self._select(self.get_exporters(), steps_to_export)

        for exporter in exporters:
            if not exporter.check_step_capabilities():
                error = AuthorizationError(get_exporter_id(exporter))
                self.context.logger.export_failed(exporter, error)
                raise error

        self.context.logger.start_export(exporters)

        steps: List[Step] = []
        for exporter in exporters:
            self._publish_before_export(exporter)
            try:
                produced = exporter.export()
            except Exception as e:
                self.context.logger.export_failed(exporter, e)
                raise ValidationError(
                    f"Export of {get_exporter_id(exporter)} failed: {e}",
                    context={"exporter": type(exporter).__name__},
                ) from e

            steps.extend(self._as_list(produced))

        self.context.logger.complete_export(exporters, len(steps))
        return {
            "landingPage": landing_page,
            "steps": [step.get_json_array() for step in steps],
        }

    @staticmethod
    def _select(
        exporters: List[StepExporter], steps_to_export: Optional[Iterable[str]]
    ) -> List[StepExporter]:
        requested = set(steps_to_export or [])
        if not requested:
            return exporters

        selected = []
        for exporter in exporters:
            names = {exporter.get_step_name()}
            if isinstance(exporter, HasAlias):
                # An aliased exporter is only requested by its alias
                names = {exporter.get_alias()}
            if names & requested:
                selected.append(exporter)
        return selected

    def _publish_before_export(self, exporter: StepExporter) -> None:
        keys = [exporter.get_step_name()]
        if isinstance(exporter, HasAlias) and exporter.get_alias() not in keys:
            keys.append(exporter.get_alias())

        for key in keys:
            for callback in self._before_export.get(key, []):
                callback(exporter)

    @staticmethod
    def _as_list(produced: Any) -> List[Step]:
        if produced is None:
            return []
        if isinstance(produced, Step):
            return [produced]
        return list(produced)
