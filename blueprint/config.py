"""Profile configuration for blueprint runs.

A profile is a YAML file describing the local site, the acting user's
capabilities, what to export and how imports are gated. Values may refer to
environment variables as ``${NAME}``.
"""

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from blueprint.context import BlueprintContext, StaticAuthorizer
from blueprint.exceptions import ValidationError
from blueprint.exporters.settings import create_settings_exporters
from blueprint.logging import get_logger
from blueprint.resources import LocalDirectoryFetcher, ResourceStorages
from blueprint.session import DEFAULT_MAX_PAYLOAD_BYTES
from blueprint.site import MEMORY_DATABASE, DuckDBSite

logger = get_logger(__name__)

PLUGIN_RESOURCE = "wordpress.org/plugins"
THEME_RESOURCE = "wordpress.org/themes"

KNOWN_SECTIONS = ("site", "actor", "export", "import", "resources", "logging")

DEFAULT_PROFILE: Dict[str, Any] = {
    "site": {"database": MEMORY_DATABASE, "table_prefix": "wp_", "content_dir": None},
    "actor": {"capabilities": []},
    "export": {"landing_page": "/", "site_options": [], "tables": []},
    "import": {
        "max_payload_bytes": DEFAULT_MAX_PAYLOAD_BYTES,
        "setup_mode": False,
        "allow_override": False,
    },
    "resources": {"plugins": [], "themes": []},
    "logging": {"verbose": False, "quiet": False},
}

LIST_SETTINGS = [
    ("actor", "capabilities"),
    ("export", "site_options"),
    ("export", "tables"),
    ("resources", "plugins"),
    ("resources", "themes"),
]

BOOL_SETTINGS = [
    ("import", "setup_mode"),
    ("import", "allow_override"),
    ("logging", "verbose"),
    ("logging", "quiet"),
]


@dataclass
class ValidationResult:
    """Result of profile validation."""

    is_valid: bool
    errors: List[str]
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.is_valid


def substitute_env(value: Any) -> Any:
    """Expand ``${NAME}`` references in every string of a nested structure."""
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {key: substitute_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_env(item) for item in value]
    return value


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass
class BlueprintConfig:
    """Loaded profile, with defaults filled in for every missing setting."""

    data: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_PROFILE))
    path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: Optional[str] = None) -> "BlueprintConfig":
        return cls(data=_merge(DEFAULT_PROFILE, substitute_env(data or {})), path=path)

    @classmethod
    def from_file(cls, path: str) -> "BlueprintConfig":
        """
        Load a profile from a YAML file.

        Raises:
            ValidationError: If the file is missing, is not valid YAML or
                does not validate
        """
        if not os.path.exists(path):
            raise ValidationError(f"Profile file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid YAML in profile '{path}': {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValidationError(f"Profile '{path}' must be a YAML dictionary")

        config = cls.from_dict(raw, path=path)
        result = config.validate()
        if not result.is_valid:
            raise ValidationError(
                f"Profile validation failed for '{path}':\n"
                + "\n".join(f"  - {error}" for error in result.errors),
                context={"errors": result.errors},
            )
        for warning in result.warnings:
            logger.warning(f"Profile '{path}': {warning}")

        logger.debug(f"Loaded profile from '{path}'")
        return config

    def section(self, name: str) -> Dict[str, Any]:
        return self.data.get(name) or {}

    def validate(self) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []

        for name in self.data:
            if name not in KNOWN_SECTIONS:
                warnings.append(f"Unknown section '{name}' is ignored")

        for name in KNOWN_SECTIONS:
            if not isinstance(self.data.get(name), dict):
                errors.append(f"Section '{name}' must be a dictionary")
        if errors:
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        for section, key in LIST_SETTINGS:
            value = self.data[section].get(key)
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                errors.append(f"'{section}.{key}' must be a list of strings")

        for section, key in BOOL_SETTINGS:
            if not isinstance(self.data[section].get(key), bool):
                errors.append(f"'{section}.{key}' must be true or false")

        max_bytes = self.data["import"].get("max_payload_bytes")
        if not isinstance(max_bytes, int) or isinstance(max_bytes, bool) or max_bytes <= 0:
            errors.append("'import.max_payload_bytes' must be a positive integer")

        prefix = self.data["site"].get("table_prefix")
        if not isinstance(prefix, str) or not prefix:
            errors.append("'site.table_prefix' must be a non-empty string")

        landing_page = self.data["export"].get("landing_page")
        if not isinstance(landing_page, str) or not landing_page.startswith("/"):
            errors.append("'export.landing_page' must be a path starting with '/'")

        if self.data["logging"].get("verbose") is True and self.data["logging"].get("quiet") is True:
            warnings.append("Both verbose and quiet logging are set; verbose wins")

        for directory in self.data["resources"].get("plugins", []) + self.data["resources"].get(
            "themes", []
        ):
            if isinstance(directory, str) and not os.path.isdir(directory):
                warnings.append(f"Resource directory does not exist: {directory}")

        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def build_site(config: BlueprintConfig) -> DuckDBSite:
    site = config.section("site")
    return DuckDBSite(
        database_path=site.get("database") or MEMORY_DATABASE,
        table_prefix=site.get("table_prefix", "wp_"),
        content_dir=site.get("content_dir"),
    )


def build_storages(config: BlueprintConfig) -> ResourceStorages:
    """One local fetcher per configured package directory."""
    resources = config.section("resources")
    storages = ResourceStorages()
    for directory in resources.get("plugins", []):
        storages.add_storage(PLUGIN_RESOURCE, LocalDirectoryFetcher(directory, PLUGIN_RESOURCE))
    for directory in resources.get("themes", []):
        storages.add_storage(THEME_RESOURCE, LocalDirectoryFetcher(directory, THEME_RESOURCE))
    return storages


def build_context(config: BlueprintConfig, site: DuckDBSite) -> BlueprintContext:
    """Wire a context whose every host collaborator is the given local site."""
    return BlueprintContext(
        authorizer=StaticAuthorizer(config.section("actor").get("capabilities", [])),
        options=site,
        statements=site,
        extensions=site,
        rows=site,
        storages=build_storages(config),
    )


def build_exporters(config: BlueprintConfig, context: BlueprintContext) -> list:
    export = config.section("export")
    return create_settings_exporters(
        context, export.get("site_options", []), export.get("tables", [])
    )
