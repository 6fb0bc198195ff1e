"""Pytest configuration for blueprint tests."""

import os
import tempfile
import zipfile
from typing import Generator

import pytest

from blueprint.context import BlueprintContext, StaticAuthorizer
from blueprint.resources import LocalDirectoryFetcher, ResourceStorages
from blueprint.site import DuckDBSite

ADMIN_CAPABILITIES = [
    "manage_options",
    "edit_posts",
    "edit_users",
    "install_plugins",
    "activate_plugins",
    "install_themes",
    "switch_themes",
]

PLUGIN_RESOURCE = "wordpress.org/plugins"
THEME_RESOURCE = "wordpress.org/themes"


def write_plugin_zip(directory: str, slug: str, name: str = "") -> str:
    """Write ``<slug>.zip`` holding ``<slug>/<slug>.php`` with a plugin header."""
    path = os.path.join(directory, f"{slug}.zip")
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(f"{slug}/", "")
        archive.writestr(
            f"{slug}/{slug}.php",
            f"<?php\n/**\n * Plugin Name: {name or slug.title()}\n */\n",
        )
    return path


def write_theme_zip(directory: str, slug: str) -> str:
    """Write ``<slug>.zip`` holding ``<slug>/style.css``."""
    path = os.path.join(directory, f"{slug}.zip")
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(f"{slug}/style.css", f"/* Theme Name: {slug} */\n")
    return path


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Yields
    ------
        Path to the temporary directory

    """
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield tmp_dir


@pytest.fixture
def site() -> Generator[DuckDBSite, None, None]:
    """In-memory DuckDB site with an empty content directory."""
    local_site = DuckDBSite()
    yield local_site
    local_site.close()


@pytest.fixture
def package_dir(temp_dir) -> str:
    """Directory of downloadable packages: akismet, hello-dolly and twentytwentyfour."""
    directory = os.path.join(temp_dir, "packages")
    os.makedirs(directory)
    write_plugin_zip(directory, "akismet", "Akismet Anti-spam")
    write_plugin_zip(directory, "hello-dolly", "Hello Dolly")
    write_theme_zip(directory, "twentytwentyfour")
    return directory


@pytest.fixture
def storages(package_dir) -> ResourceStorages:
    """Resource storages serving the packages in package_dir."""
    registry = ResourceStorages()
    registry.add_storage(PLUGIN_RESOURCE, LocalDirectoryFetcher(package_dir, PLUGIN_RESOURCE))
    registry.add_storage(THEME_RESOURCE, LocalDirectoryFetcher(package_dir, THEME_RESOURCE))
    return registry


@pytest.fixture
def context(site, storages) -> BlueprintContext:
    """Administrator context backed by the in-memory site."""
    return BlueprintContext(
        authorizer=StaticAuthorizer(ADMIN_CAPABILITIES),
        options=site,
        statements=site,
        extensions=site,
        rows=site,
        storages=storages,
    )


@pytest.fixture
def make_context(site, storages):
    """Factory for contexts with a chosen set of capabilities."""

    def _make(capabilities):
        return BlueprintContext(
            authorizer=StaticAuthorizer(capabilities),
            options=site,
            statements=site,
            extensions=site,
            rows=site,
            storages=storages,
        )

    return _make


@pytest.fixture
def plugin_zip():
    """Writer for plugin packages: plugin_zip(directory, slug, name="")."""
    return write_plugin_zip


@pytest.fixture
def theme_zip():
    """Writer for theme packages: theme_zip(directory, slug)."""
    return write_theme_zip
