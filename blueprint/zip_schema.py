"""Zip bundles of exported schemas.

A bundle holds blueprint.json plus the plugin and theme packages it refers
to, so it can be imported on a site that cannot reach the original resource
storages.
"""

import copy
import json
import os
import zipfile
from typing import Any, Dict

from blueprint.exceptions import ValidationError
from blueprint.import_schema import SCHEMA_FILE_NAME
from blueprint.logging import get_logger
from blueprint.resources.storage import ResourceStorages

logger = get_logger(__name__)

BUNDLED_STEPS = {
    "installPlugin": ("pluginData", "plugins"),
    "installTheme": ("themeData", "themes"),
}


class ZipExportedSchema:
    """Writes an exported schema and its packages into one archive."""

    def __init__(self, schema: Dict[str, Any], storages: ResourceStorages):
        self.schema = schema
        self.storages = storages

    def zip(self, destination: str) -> str:
        """
        Build the archive.

        Args:
            destination: Path of the zip file to write

        Returns:
            The destination path

        Raises:
            ValidationError: If a referenced package cannot be fetched
        """
        schema = copy.deepcopy(self.schema)
        directory = os.path.dirname(os.path.abspath(destination))
        os.makedirs(directory, exist_ok=True)

        try:
            self._write(schema, destination)
        except ValidationError:
            if os.path.exists(destination):
                os.remove(destination)
            raise

        return destination

    def _write(self, schema: Dict[str, Any], destination: str) -> None:
        with zipfile.ZipFile(destination, "w", zipfile.ZIP_DEFLATED) as archive:
            for step in schema.get("steps", []):
                bundled = BUNDLED_STEPS.get(step.get("step"))
                if bundled is None:
                    continue

                data_key, kind = bundled
                data = step[data_key]
                package = self.storages.download(data["slug"], data["resource"])
                if not package or not os.path.isfile(package):
                    raise ValidationError(
                        f"Unable to bundle {data['slug']}: no package found "
                        f"for resource type {data['resource']}"
                    )

                archive.write(package, f"{kind}/{data['slug']}.zip")
                data["resource"] = f"self/{kind}"
                logger.debug(f"Bundled {data['slug']} from {package}")

            archive.writestr(SCHEMA_FILE_NAME, json.dumps(schema, indent=2))
