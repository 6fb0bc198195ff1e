"""Tests for profile configuration."""

import os

import pytest

from blueprint.config import (
    PLUGIN_RESOURCE,
    BlueprintConfig,
    build_context,
    build_exporters,
    build_site,
    build_storages,
)
from blueprint.exceptions import ValidationError


def write_profile(directory, content, name="site.yml"):
    path = os.path.join(directory, name)
    with open(path, "w") as f:
        f.write(content)
    return path


class TestLoading:
    """Reading YAML profiles."""

    def test_defaults(self):
        """An empty configuration has every section filled in."""
        config = BlueprintConfig()

        assert config.section("site")["table_prefix"] == "wp_"
        assert config.section("import")["max_payload_bytes"] == 5 * 1024 * 1024
        assert config.section("import")["setup_mode"] is False
        assert config.section("export")["landing_page"] == "/"
        assert config.validate().is_valid

    def test_partial_profile_merges_with_defaults(self, temp_dir):
        """Settings missing from the file keep their defaults."""
        path = write_profile(
            temp_dir,
            "actor:\n  capabilities: [manage_options]\nimport:\n  setup_mode: true\n",
        )

        config = BlueprintConfig.from_file(path)

        assert config.section("actor")["capabilities"] == ["manage_options"]
        assert config.section("import")["setup_mode"] is True
        assert config.section("import")["allow_override"] is False
        assert config.path == path

    def test_environment_substitution(self, temp_dir, monkeypatch):
        """${NAME} references are replaced from the environment."""
        monkeypatch.setenv("BLUEPRINT_DB", os.path.join(temp_dir, "site.duckdb"))
        path = write_profile(temp_dir, "site:\n  database: ${BLUEPRINT_DB}\n")

        config = BlueprintConfig.from_file(path)

        assert config.section("site")["database"] == os.path.join(temp_dir, "site.duckdb")

    def test_empty_file(self, temp_dir):
        """An empty file is the default profile."""
        config = BlueprintConfig.from_file(write_profile(temp_dir, ""))

        assert config.validate().is_valid

    def test_missing_file(self, temp_dir):
        """A missing profile raises ValidationError."""
        with pytest.raises(ValidationError):
            BlueprintConfig.from_file(os.path.join(temp_dir, "missing.yml"))

    def test_invalid_yaml(self, temp_dir):
        """Broken YAML raises ValidationError."""
        with pytest.raises(ValidationError):
            BlueprintConfig.from_file(write_profile(temp_dir, "site: [unclosed\n"))

    def test_invalid_values(self, temp_dir):
        """Profiles that do not validate raise with every error listed."""
        path = write_profile(
            temp_dir,
            "import:\n  setup_mode: 'yes'\n  max_payload_bytes: -1\nactor:\n  capabilities: admin\n",
        )

        with pytest.raises(ValidationError) as exc_info:
            BlueprintConfig.from_file(path)

        errors = exc_info.value.context["errors"]
        assert "'import.setup_mode' must be true or false" in errors
        assert "'import.max_payload_bytes' must be a positive integer" in errors
        assert "'actor.capabilities' must be a list of strings" in errors


class TestValidate:
    """Validation results."""

    def test_warnings(self, temp_dir):
        """Unknown sections and missing directories only warn."""
        config = BlueprintConfig.from_dict(
            {"extras": {}, "resources": {"plugins": [os.path.join(temp_dir, "nope")]}}
        )

        result = config.validate()

        assert result.is_valid
        assert bool(result)
        assert "Unknown section 'extras' is ignored" in result.warnings
        assert any("does not exist" in warning for warning in result.warnings)

    def test_landing_page_must_be_a_path(self):
        """The export landing page must start with a slash."""
        result = BlueprintConfig.from_dict({"export": {"landing_page": "wp-admin"}}).validate()

        assert not result
        assert "'export.landing_page' must be a path starting with '/'" in result.errors

    def test_section_must_be_a_mapping(self):
        """Sections given as scalars are errors."""
        result = BlueprintConfig.from_dict({"site": "nope"}).validate()

        assert result.errors == ["Section 'site' must be a dictionary"]


class TestFactories:
    """Building runtime objects from a profile."""

    def test_storages_per_directory(self, temp_dir):
        """Each configured directory becomes one fetcher."""
        config = BlueprintConfig.from_dict(
            {"resources": {"plugins": [temp_dir, temp_dir], "themes": [temp_dir]}}
        )

        storages = build_storages(config)

        assert len(storages.get_fetchers(PLUGIN_RESOURCE)) == 2
        assert len(storages) == 3

    def test_context_and_exporters(self):
        """The context wires the local site and the configured actor."""
        config = BlueprintConfig.from_dict(
            {
                "site": {"table_prefix": "shop_"},
                "actor": {"capabilities": ["manage_options"]},
                "export": {"site_options": ["blogname"], "tables": ["shop_options"]},
            }
        )

        with build_site(config) as site:
            context = build_context(config, site)
            exporters = build_exporters(config, context)

            assert context.table_prefix == "shop_"
            assert context.actor_can("manage_options")
            assert not context.actor_can("edit_users")
            assert [type(e).__name__ for e in exporters] == ["ExportSiteOptions", "ExportTableRows"]
