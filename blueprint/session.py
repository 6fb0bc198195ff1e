"""Import sessions.

Transport layers (an HTTP endpoint, the CLI) hand an uploaded schema to
queue(), get an opaque reference back, and later call process() with that
reference, either once for the whole document or once per step so a long
import can span several requests. Imports are refused unless the site is in
setup mode or an explicit override is configured.
"""

import os
import secrets
import tempfile
from typing import Any, Dict, Iterable, List, Optional

from blueprint.context import BlueprintContext
from blueprint.exceptions import ValidationError
from blueprint.import_schema import ImportSchema
from blueprint.logging import get_logger
from blueprint.results import JsonResultFormatter, is_run_successful

logger = get_logger(__name__)

DEFAULT_MAX_PAYLOAD_BYTES = 5 * 1024 * 1024

# Human labels for the parts of a site an import overwrites
SETTINGS_LABELS = {
    "setSiteOptions": "Site options",
    "runSql": "Database rows",
    "activatePlugin": "Plugins",
    "installPlugin": "Plugins",
    "activateTheme": "Themes",
    "installTheme": "Themes",
}


def settings_to_overwrite(
    steps: Iterable[Dict[str, Any]], labels: Optional[Dict[str, str]] = None
) -> List[str]:
    """Labels of the settings a list of steps would overwrite, without duplicates."""
    labels = labels if labels is not None else SETTINGS_LABELS
    found: List[str] = []
    for step in steps:
        name = (step.get("meta") or {}).get("alias") or step.get("step")
        label = labels.get(name) or labels.get(step.get("step"))
        if label and label not in found:
            found.append(label)
    return found


class ImportSessionManager:
    """Stores queued schema documents and imports them on request."""

    def __init__(
        self,
        context: BlueprintContext,
        session_dir: Optional[str] = None,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
        setup_mode: bool = False,
        allow_override: bool = False,
        importers: Optional[Iterable[Any]] = None,
    ):
        self.context = context
        self.session_dir = session_dir or os.path.join(
            tempfile.gettempdir(), "blueprint-sessions"
        )
        self.max_payload_bytes = max_payload_bytes
        self.setup_mode = setup_mode
        self.allow_override = allow_override
        self.importers = importers
        os.makedirs(self.session_dir, exist_ok=True)

    def imports_allowed(self) -> bool:
        return self.setup_mode or self.allow_override

    def queue(self, payload: bytes, filename: str = "blueprint.json") -> Dict[str, Any]:
        """
        Validate and store an uploaded document.

        Returns:
            {"reference", "settings_to_overwrite", "error_type", "errors"}
        """
        response: Dict[str, Any] = {
            "reference": None,
            "settings_to_overwrite": [],
            "error_type": None,
            "errors": [],
        }

        if len(payload) > self.max_payload_bytes:
            response["error_type"] = "upload"
            response["errors"].append(
                f"Payload is {len(payload)} bytes, the limit is {self.max_payload_bytes}"
            )
            return response

        extension = "zip" if filename.lower().endswith(".zip") else "json"
        reference = f"{secrets.token_urlsafe(16)}.{extension}"
        path = self._path(reference)
        with open(path, "wb") as f:
            f.write(payload)

        try:
            blueprint = self._load(path)
        except ValidationError as e:
            os.remove(path)
            response["error_type"] = "schema_validation"
            response["errors"].append(e.message)
            return response

        try:
            response["settings_to_overwrite"] = settings_to_overwrite(blueprint.get_steps())
        finally:
            blueprint.cleanup()

        response["reference"] = reference
        logger.info(f"Queued blueprint {reference} ({len(payload)} bytes)")
        return response

    def process(self, reference: str, step_index: Optional[int] = None) -> Dict[str, Any]:
        """
        Import a queued document, or a single step of it.

        Args:
            reference: Value returned by queue()
            step_index: Import only this step (0-based); None imports all

        Returns:
            {"processed", "message", "next_step", "landing_page", "results"}
        """
        response: Dict[str, Any] = {
            "processed": False,
            "message": "",
            "next_step": None,
            "landing_page": None,
            "results": [],
        }

        if not self.imports_allowed():
            response["message"] = (
                "Blueprint imports are only allowed while the site is in setup mode"
            )
            return response

        try:
            path = self._path(reference)
        except ValidationError as e:
            response["message"] = e.message
            return response

        if not os.path.isfile(path):
            response["message"] = f"Unknown reference: {reference}"
            return response

        try:
            blueprint = self._load(path)
        except ValidationError as e:
            response["message"] = e.message
            return response

        try:
            steps = blueprint.get_steps()
            if step_index is None:
                results = blueprint.import_steps()
            elif 0 <= step_index < len(steps):
                results = [blueprint.import_step(steps[step_index])]
                if step_index + 1 < len(steps):
                    response["next_step"] = step_index + 1
            else:
                response["message"] = f"Step index {step_index} is out of range"
                return response
        finally:
            blueprint.cleanup()

        is_success = is_run_successful(results)
        response["processed"] = is_success
        response["message"] = (
            "success" if is_success else "There was an error while processing your schema"
        )
        response["landing_page"] = blueprint.get_landing_page()
        response["results"] = JsonResultFormatter(results).format()

        if response["next_step"] is None:
            self.discard(reference)
        return response

    def discard(self, reference: str) -> None:
        path = self._path(reference)
        if os.path.isfile(path):
            os.remove(path)

    def _path(self, reference: str) -> str:
        # References are generated by queue(); anything path-like is foreign
        if os.path.basename(reference) != reference or reference.startswith("."):
            raise ValidationError(f"Invalid reference: {reference}")
        return os.path.join(self.session_dir, reference)

    def _load(self, path: str) -> ImportSchema:
        if path.endswith(".zip"):
            return ImportSchema.create_from_zip(path, self.context, self.importers)
        return ImportSchema.create_from_json(path, self.context, self.importers)
