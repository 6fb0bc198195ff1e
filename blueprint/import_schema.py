"""Import pipeline.

Replays a schema document step by step. Each step is resolved to its
processor, validated against the processor's JSON Schema, authorized and
only then processed. Steps are isolated from each other: a failing step
yields a failed result and the run moves on to the next one. Callers decide
overall success by scanning the returned results.
"""

import copy
import json
import os
import shutil
import tempfile
import zipfile
from typing import Any, Dict, Iterable, List, Optional

from blueprint.context import BlueprintContext
from blueprint.exceptions import NotFoundError, ValidationError
from blueprint.importers import create_builtin_importers
from blueprint.logging import get_logger
from blueprint.registry import StepProcessorRegistry
from blueprint.resources.archive import extract_zip
from blueprint.resources.local_directory import LocalDirectoryFetcher
from blueprint.resources.storage import ResourceStorages
from blueprint.results import StepProcessorResult
from blueprint.schema_validator import validate

logger = get_logger(__name__)

SCHEMA_FILE_NAME = "blueprint.json"

# Shape every document must have before any step is looked at
DOCUMENT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "landingPage": {"type": "string"},
        "steps": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"step": {"type": "string"}},
                "required": ["step"],
            },
        },
    },
    "required": ["steps"],
}


class ImportSchema:
    """Imports the steps of one schema document."""

    def __init__(
        self,
        schema: Dict[str, Any],
        context: BlueprintContext,
        importers: Optional[Iterable[Any]] = None,
    ):
        """
        Initialize the import pipeline.

        Args:
            schema: Parsed schema document
            context: Services for this run
            importers: Externally registered processors, either a list (each
                registered under the step name it declares) or a mapping of
                step name to processor; they win over built-in processors
                for the same step name

        Raises:
            ValidationError: If the document has no steps array
        """
        outcome = validate(schema, DOCUMENT_SCHEMA)
        if not outcome.valid:
            raise ValidationError(
                "Invalid schema document: " + "; ".join(outcome.errors)
            )

        self.schema = schema
        self.context = context
        if isinstance(importers, dict):
            self.importers = list(importers.items())
        else:
            self.importers = [(None, importer) for importer in importers or []]
        self._registry: Optional[StepProcessorRegistry] = None
        self._extracted_dir: Optional[str] = None

    @classmethod
    def create_from_json(
        cls,
        path: str,
        context: BlueprintContext,
        importers: Optional[Iterable[Any]] = None,
    ) -> "ImportSchema":
        """Load a schema document from a JSON file."""
        if not os.path.isfile(path):
            raise ValidationError(f"Schema file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}") from e

        return cls(schema, context, importers)

    @classmethod
    def create_from_zip(
        cls,
        path: str,
        context: BlueprintContext,
        importers: Optional[Iterable[Any]] = None,
    ) -> "ImportSchema":
        """
        Load a zip bundle produced by ZipExportedSchema.

        The archive is extracted to a temporary directory; bundled packages
        become available through the "self/plugins" and "self/themes"
        resource types. Call cleanup() (or use the instance as a context
        manager) to remove the directory.
        """
        if not os.path.isfile(path):
            raise ValidationError(f"Schema file not found: {path}")

        target = tempfile.mkdtemp(prefix="blueprint-")
        try:
            extract_zip(path, target)
        except (zipfile.BadZipFile, ValidationError) as e:
            shutil.rmtree(target, ignore_errors=True)
            raise ValidationError(f"Invalid zip bundle {path}: {e}") from e

        schema_path = os.path.join(target, SCHEMA_FILE_NAME)
        try:
            storages = bundle_storages(target, context.storages)
            instance = cls.create_from_json(
                schema_path, context.with_storages(storages), importers
            )
        except ValidationError:
            shutil.rmtree(target, ignore_errors=True)
            raise

        instance._extracted_dir = target
        return instance

    def get_schema(self) -> Dict[str, Any]:
        return self.schema

    def get_steps(self) -> List[Dict[str, Any]]:
        return list(self.schema["steps"])

    def get_landing_page(self) -> Optional[str]:
        return self.schema.get("landingPage")

    def build_registry(self) -> StepProcessorRegistry:
        """Index built-in processors, then external ones so they take precedence."""
        registry = StepProcessorRegistry(create_builtin_importers(self.context))
        for step_name, importer in self.importers:
            try:
                registry.register(importer, step_name)
            except ValueError as e:
                logger.warning(f"Ignoring importer: {e}")
        return registry

    def get_registry(self) -> StepProcessorRegistry:
        if self._registry is None:
            self._registry = self.build_registry()
        return self._registry

    def import_steps(self) -> List[StepProcessorResult]:
        """
        Import every step in order.

        Returns:
            One leading "ImportSchema" result followed by one result per step
        """
        self._registry = self.build_registry()
        results = [StepProcessorResult.success("ImportSchema")]
        for step in self.get_steps():
            results.append(self.import_step(step))
        return results

    def import_step(self, step: Dict[str, Any]) -> StepProcessorResult:
        """
        Import one step document.

        Lookup, schema validation and the capability check each stop the
        step with a failed result before the processor runs.
        """
        step_name = step.get("step", "") if isinstance(step, dict) else ""
        result = StepProcessorResult.success(step_name)
        registry = self.get_registry()

        try:
            processor = registry.require(step_name)
        except NotFoundError as e:
            result.add_error(e.message)
            logger.warning(
                f"Skipped step '{step_name}': no importer registered "
                f"({len(e.available)} available)"
            )
            return result

        if not registry.is_valid_processor(processor):
            result.add_error(f"Incorrect importer type for {step_name}")
            logger.warning(
                f"Skipped step '{step_name}': {type(processor).__name__} is not a StepProcessor"
            )
            return result

        outcome = validate(step, processor.get_schema())
        if not outcome.valid:
            result.add_error(
                f"Schema validation failed for step {step_name}: " + "\n".join(outcome.errors)
            )
            return result

        # Processors get their own copy; the document itself is never changed
        definition = copy.deepcopy(step)

        if not processor.check_step_capabilities(definition):
            result.add_error(
                f"User does not have the required capabilities to run step {step_name}"
            )
            return result

        self.context.logger.start_import(step_name, processor)
        try:
            result.merge(processor.process(definition))
        except Exception as e:
            logger.error(f"Unhandled exception in step '{step_name}': {e}", exc_info=True)
            result.add_error(f"Exception while processing {step_name}: {e}")

        if result.is_success():
            self.context.logger.complete_import(step_name, result)
        else:
            self.context.logger.import_failed(step_name, result)

        return result

    def cleanup(self) -> None:
        """Remove files extracted from a zip bundle."""
        if self._extracted_dir:
            shutil.rmtree(self._extracted_dir, ignore_errors=True)
            self._extracted_dir = None

    def __enter__(self) -> "ImportSchema":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()


def bundle_storages(directory: str, base: ResourceStorages) -> ResourceStorages:
    """Copy a resource registry and add fetchers for packages shipped in a bundle."""
    storages = ResourceStorages()
    for resource_type in base.get_supported_types():
        for fetcher in base.get_fetchers(resource_type):
            storages.add_storage(resource_type, fetcher)

    for kind in ("plugins", "themes"):
        storages.add_storage(
            f"self/{kind}",
            LocalDirectoryFetcher(os.path.join(directory, kind), f"self/{kind}"),
        )
    return storages
