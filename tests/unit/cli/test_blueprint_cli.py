"""Tests for the blueprint command line interface."""

import json
import os

import pytest
from typer.testing import CliRunner

from blueprint import __version__
from blueprint.cli.main import app
from blueprint.site import DuckDBSite

ADMIN = "[manage_options, edit_posts, edit_users, install_plugins, activate_plugins, install_themes, switch_themes]"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def site_paths(temp_dir):
    """Database file and content directory shared by successive invocations."""
    return {
        "database_path": os.path.join(temp_dir, "site.duckdb"),
        "content_dir": os.path.join(temp_dir, "content"),
    }


@pytest.fixture
def write_profile(temp_dir, site_paths, package_dir):
    """Write a profile for the test site and return its path."""

    def _write(capabilities=ADMIN, setup_mode="true", extra=""):
        path = os.path.join(temp_dir, "profile.yml")
        with open(path, "w") as f:
            f.write(
                f"site:\n"
                f"  database: {site_paths['database_path']}\n"
                f"  content_dir: {site_paths['content_dir']}\n"
                f"actor:\n"
                f"  capabilities: {capabilities}\n"
                f"export:\n"
                f"  site_options: [blogname]\n"
                f"import:\n"
                f"  setup_mode: {setup_mode}\n"
                f"resources:\n"
                f"  plugins: [{package_dir}]\n"
                f"  themes: [{package_dir}]\n"
                f"{extra}"
            )
        return path

    return _write


def write_document(temp_dir, document, name="blueprint.json"):
    path = os.path.join(temp_dir, name)
    with open(path, "w") as f:
        json.dump(document, f)
    return path


class TestGlobalOptions:
    """Version and profile handling."""

    def test_version(self, runner):
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"Blueprint CLI v{__version__}" in result.stdout

    def test_missing_profile(self, runner, temp_dir):
        """An unreadable profile exits with an error."""
        result = runner.invoke(
            app, ["--profile", os.path.join(temp_dir, "missing.yml"), "steps"]
        )

        assert result.exit_code == 1
        assert "missing.yml" in result.stdout


class TestCheckSql:
    """check-sql command."""

    def test_allowed_statement(self, runner):
        """Allowed statements exit cleanly."""
        result = runner.invoke(app, ["check-sql", "UPDATE wp_posts SET post_status = 'draft'"])

        assert result.exit_code == 0
        assert "Statement allowed" in result.stdout

    def test_rejected_statement(self, runner):
        """Rejected statements show the gate and exit with 1."""
        result = runner.invoke(app, ["check-sql", "UPDATE wp_users SET user_pass = 'x'"])

        assert result.exit_code == 1
        assert "protected_table" in result.stdout
        assert "Modifications to admin users or roles are not allowed." in result.stdout


class TestSteps:
    """steps command."""

    def test_lists_steps_and_exporters(self, runner, write_profile):
        """Step types and exporter labels are listed."""
        result = runner.invoke(app, ["--profile", write_profile(), "steps"])

        assert result.exit_code == 0
        assert "runSql" in result.stdout
        assert "setSiteOptions" in result.stdout
        assert "Plugins" in result.stdout


class TestExport:
    """export command."""

    def test_export_to_stdout(self, runner, write_profile, site_paths):
        """Without --output the document goes to stdout."""
        with DuckDBSite(**site_paths) as site:
            site.update_option("blogname", "Shop")

        result = runner.invoke(app, ["-q", "--profile", write_profile(), "export"])

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document["landingPage"] == "/"
        assert document["steps"] == [{"step": "setSiteOptions", "options": {"blogname": "Shop"}}]

    def test_export_to_file(self, runner, write_profile, temp_dir):
        """--output writes the document and reports it."""
        output = os.path.join(temp_dir, "out.json")

        result = runner.invoke(
            app, ["--profile", write_profile(), "export", "--step", "setSiteOptions", "-o", output]
        )

        assert result.exit_code == 0
        assert "Blueprint exported successfully" in result.stdout
        with open(output) as f:
            assert json.load(f)["steps"][0]["step"] == "setSiteOptions"

    def test_export_forbidden(self, runner, write_profile):
        """Missing capabilities abort the export."""
        result = runner.invoke(app, ["--profile", write_profile(capabilities="[]"), "export"])

        assert result.exit_code == 1
        assert "Error during export" in result.stdout

    def test_zip_requires_output(self, runner, write_profile):
        """--zip needs a destination file."""
        result = runner.invoke(app, ["--profile", write_profile(), "export", "--zip"])

        assert result.exit_code == 1
        assert "--zip requires --output" in result.stdout


class TestImport:
    """import command."""

    def test_import_document(self, runner, write_profile, site_paths, temp_dir):
        """A valid document is applied to the site."""
        path = write_document(
            temp_dir,
            {
                "steps": [
                    {"step": "setSiteOptions", "options": {"blogname": "Imported"}},
                    {
                        "step": "installPlugin",
                        "pluginData": {"resource": "wordpress.org/plugins", "slug": "akismet"},
                        "options": {"activate": True},
                    },
                ]
            },
        )

        result = runner.invoke(app, ["--profile", write_profile(), "import", path])

        assert result.exit_code == 0, result.stdout
        assert "Blueprint imported successfully" in result.stdout
        with DuckDBSite(**site_paths) as site:
            assert site.get_option("blogname") == "Imported"
            assert site.is_plugin_active("akismet/akismet.php")

    def test_failed_step_exits_with_error(self, runner, write_profile, temp_dir):
        """Any failed step makes the command fail."""
        path = write_document(temp_dir, {"steps": [{"step": "runSql", "sql": {
            "resource": "literal", "name": "x.sql", "contents": "DELETE FROM wp_posts"}}]})

        result = runner.invoke(app, ["--profile", write_profile(), "import", path])

        assert result.exit_code == 1
        assert "Blueprint import finished with errors" in result.stdout

    def test_refused_outside_setup_mode(self, runner, write_profile, temp_dir):
        """Sites that are not in setup mode refuse imports."""
        path = write_document(temp_dir, {"steps": []})

        result = runner.invoke(
            app, ["--profile", write_profile(setup_mode="false"), "import", path]
        )

        assert result.exit_code == 1
        assert "was rejected" in result.stdout

    def test_missing_file(self, runner, temp_dir):
        """An unreadable file exits with an error."""
        result = runner.invoke(app, ["import", os.path.join(temp_dir, "missing.json")])

        assert result.exit_code == 1
        assert "Cannot read" in result.stdout
