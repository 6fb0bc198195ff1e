"""Tests for zip bundles."""

import json
import os
import zipfile

import pytest

from blueprint.exceptions import ValidationError
from blueprint.import_schema import ImportSchema
from blueprint.resources import ResourceStorages
from blueprint.zip_schema import ZipExportedSchema

SCHEMA = {
    "landingPage": "/",
    "steps": [
        {
            "step": "installPlugin",
            "pluginData": {"resource": "wordpress.org/plugins", "slug": "akismet"},
            "options": {"activate": True},
        },
        {
            "step": "installTheme",
            "themeData": {"resource": "wordpress.org/themes", "slug": "twentytwentyfour"},
        },
        {"step": "setSiteOptions", "options": {"blogname": "Shop"}},
    ],
}


class TestZipExportedSchema:
    """Writing bundles."""

    def test_bundle_contents(self, storages, temp_dir):
        """Packages are bundled and their resources point inside the bundle."""
        destination = os.path.join(temp_dir, "out", "site.zip")

        ZipExportedSchema(SCHEMA, storages).zip(destination)

        with zipfile.ZipFile(destination) as archive:
            names = set(archive.namelist())
            document = json.loads(archive.read("blueprint.json"))

        assert names == {"blueprint.json", "plugins/akismet.zip", "themes/twentytwentyfour.zip"}
        assert document["steps"][0]["pluginData"]["resource"] == "self/plugins"
        assert document["steps"][1]["themeData"]["resource"] == "self/themes"
        assert document["steps"][2] == SCHEMA["steps"][2]

    def test_source_schema_is_not_modified(self, storages, temp_dir):
        """The exported document keeps its original resources."""
        ZipExportedSchema(SCHEMA, storages).zip(os.path.join(temp_dir, "site.zip"))

        assert SCHEMA["steps"][0]["pluginData"]["resource"] == "wordpress.org/plugins"

    def test_missing_package(self, temp_dir):
        """A package no storage can provide fails the bundle and leaves no file."""
        destination = os.path.join(temp_dir, "site.zip")

        with pytest.raises(ValidationError):
            ZipExportedSchema(SCHEMA, ResourceStorages()).zip(destination)
        assert not os.path.exists(destination)


class TestImportFromZip:
    """Reading bundles."""

    def test_import_uses_bundled_packages(self, storages, make_context, site, temp_dir):
        """A bundle imports without access to the original storages."""
        destination = os.path.join(temp_dir, "site.zip")
        ZipExportedSchema(SCHEMA, storages).zip(destination)

        # A context without any resource storage
        context = make_context(["install_plugins", "install_themes", "manage_options"])
        context = context.with_storages(ResourceStorages())

        with ImportSchema.create_from_zip(destination, context) as blueprint:
            extracted = blueprint._extracted_dir
            results = blueprint.import_steps()

        assert all(result.is_success() for result in results)
        assert site.is_plugin_active("akismet/akismet.php")
        assert "twentytwentyfour" in site.get_themes()
        assert site.get_option("blogname") == "Shop"
        assert not os.path.exists(extracted)

    def test_not_a_zip(self, context, temp_dir):
        """Files that are not archives raise ValidationError."""
        path = os.path.join(temp_dir, "fake.zip")
        with open(path, "w") as f:
            f.write("nope")

        with pytest.raises(ValidationError):
            ImportSchema.create_from_zip(path, context)

    def test_zip_without_document(self, context, temp_dir):
        """Archives lacking blueprint.json raise ValidationError."""
        path = os.path.join(temp_dir, "empty.zip")
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("readme.txt", "hi")

        with pytest.raises(ValidationError):
            ImportSchema.create_from_zip(path, context)
