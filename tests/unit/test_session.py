"""Tests for import sessions."""

import json
import os

import pytest

from blueprint.session import ImportSessionManager, settings_to_overwrite

DOCUMENT = {
    "landingPage": "/wp-admin/",
    "steps": [
        {"step": "setSiteOptions", "options": {"blogname": "Shop"}},
        {
            "step": "installPlugin",
            "pluginData": {"resource": "wordpress.org/plugins", "slug": "akismet"},
        },
        {
            "step": "runSql",
            "sql": {
                "resource": "literal",
                "name": "a.sql",
                "contents": "UPDATE wp_options SET autoload = 'no' WHERE option_name = 'blogname'",
            },
            "meta": {"alias": "tableRows"},
        },
    ],
}


@pytest.fixture
def payload():
    return json.dumps(DOCUMENT).encode("utf-8")


@pytest.fixture
def manager(context, temp_dir):
    return ImportSessionManager(
        context, session_dir=os.path.join(temp_dir, "sessions"), setup_mode=True
    )


class TestSettingsToOverwrite:
    """Human labels for what an import replaces."""

    def test_labels_without_duplicates(self):
        """Each label appears once, in step order."""
        steps = DOCUMENT["steps"] + [{"step": "installTheme"}, {"step": "activatePlugin"}]

        assert settings_to_overwrite(steps) == [
            "Site options",
            "Plugins",
            "Database rows",
            "Themes",
        ]

    def test_unknown_steps_have_no_label(self):
        """Steps without a label are left out."""
        assert settings_to_overwrite([{"step": "custom"}]) == []


class TestQueue:
    """Storing uploads."""

    def test_queue_returns_reference(self, manager, payload):
        """A valid document is stored under an opaque reference."""
        response = manager.queue(payload)

        assert response["errors"] == []
        assert response["error_type"] is None
        assert response["reference"].endswith(".json")
        assert response["settings_to_overwrite"] == ["Site options", "Plugins", "Database rows"]
        assert os.path.isfile(os.path.join(manager.session_dir, response["reference"]))

    def test_references_are_unique(self, manager, payload):
        """Every upload gets its own reference."""
        assert manager.queue(payload)["reference"] != manager.queue(payload)["reference"]

    def test_payload_too_large(self, context, temp_dir, payload):
        """Uploads over the limit are refused before parsing."""
        manager = ImportSessionManager(context, session_dir=temp_dir, max_payload_bytes=10)

        response = manager.queue(payload)

        assert response["reference"] is None
        assert response["error_type"] == "upload"

    def test_invalid_document(self, manager):
        """Unparseable documents are refused and not kept."""
        response = manager.queue(b'{"landingPage": "/"}')

        assert response["reference"] is None
        assert response["error_type"] == "schema_validation"
        assert os.listdir(manager.session_dir) == []


class TestProcess:
    """Running queued imports."""

    def test_refused_outside_setup_mode(self, context, temp_dir, payload):
        """Imports need setup mode or an explicit override."""
        manager = ImportSessionManager(context, session_dir=temp_dir)
        reference = manager.queue(payload)["reference"]

        response = manager.process(reference)

        assert response["processed"] is False
        assert response["results"] == []
        assert "setup mode" in response["message"]

    def test_override_allows_import(self, context, temp_dir, payload, site):
        """allow_override lifts the setup-mode restriction."""
        manager = ImportSessionManager(context, session_dir=temp_dir, allow_override=True)

        response = manager.process(manager.queue(payload)["reference"])

        assert response["processed"] is True
        assert site.get_option("blogname") == "Shop"

    def test_whole_document(self, manager, payload, site):
        """Without an index every step is imported and the upload discarded."""
        reference = manager.queue(payload)["reference"]

        response = manager.process(reference)

        assert response["processed"] is True
        assert response["message"] == "success"
        assert response["landing_page"] == "/wp-admin/"
        assert response["next_step"] is None
        assert site.is_plugin_active("akismet/akismet.php") is False
        assert "akismet/akismet.php" in site.get_plugins()
        assert not os.path.exists(os.path.join(manager.session_dir, reference))

    def test_step_by_step(self, manager, payload, site):
        """With an index one step runs and the next index is reported."""
        reference = manager.queue(payload)["reference"]

        first = manager.process(reference, 0)
        assert first["next_step"] == 1
        assert site.get_option("blogname") == "Shop"
        assert site.get_plugins() == {}

        second = manager.process(reference, first["next_step"])
        third = manager.process(reference, second["next_step"])

        assert third["processed"] is True
        assert third["next_step"] is None
        assert "akismet/akismet.php" in site.get_plugins()
        assert not os.path.exists(os.path.join(manager.session_dir, reference))

    def test_failed_step_is_reported(self, manager, site):
        """A failing step makes the response unprocessed with its messages."""
        document = {"steps": [{"step": "activateTheme", "themeFolderName": "missing"}]}

        response = manager.process(manager.queue(json.dumps(document).encode())["reference"])

        assert response["processed"] is False
        assert response["message"] == "There was an error while processing your schema"
        assert {
            "step": "activateTheme",
            "type": "error",
            "message": "Unable to activate missing: theme is not installed.",
        } in response["results"]

    def test_unknown_reference(self, manager):
        """Unknown references are reported, not raised."""
        response = manager.process("nope.json")

        assert response["processed"] is False
        assert "Unknown reference" in response["message"]

    def test_out_of_range_index(self, manager, payload):
        """An index past the last step is reported."""
        response = manager.process(manager.queue(payload)["reference"], 7)

        assert response["processed"] is False
        assert "out of range" in response["message"]

    @pytest.mark.parametrize("reference", ["../etc/passwd", ".hidden.json", "a/b.json"])
    def test_path_like_reference(self, manager, reference):
        """References that point outside the session directory are reported."""
        response = manager.process(reference)

        assert response["processed"] is False
        assert response["message"] == f"Invalid reference: {reference}"
        assert response["results"] == []
