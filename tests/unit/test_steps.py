"""Tests for step definitions and their schemas."""

from blueprint.schema_validator import validate
from blueprint.steps import (
    BUILTIN_STEPS,
    ActivatePlugin,
    ActivateTheme,
    InstallPlugin,
    InstallTheme,
    RunSql,
    SetSiteOptions,
)


class TestStepDocuments:
    """Wire documents produced by steps."""

    def test_install_plugin(self):
        """installPlugin carries pluginData and options."""
        step = InstallPlugin("akismet", "wordpress.org/plugins", {"activate": True})

        assert step.get_json_array() == {
            "step": "installPlugin",
            "pluginData": {"resource": "wordpress.org/plugins", "slug": "akismet"},
            "options": {"activate": True},
        }

    def test_install_theme_without_options(self):
        """Empty options are left out of the document."""
        step = InstallTheme("twentytwentyfour", "wordpress.org/themes")

        assert step.get_json_array() == {
            "step": "installTheme",
            "themeData": {"resource": "wordpress.org/themes", "slug": "twentytwentyfour"},
        }

    def test_activate_steps(self):
        """Activation steps name what they activate."""
        assert ActivatePlugin("akismet/akismet.php", "Akismet").get_json_array() == {
            "step": "activatePlugin",
            "pluginPath": "akismet/akismet.php",
            "pluginName": "Akismet",
        }
        assert ActivateTheme("twentytwentyfour").get_json_array() == {
            "step": "activateTheme",
            "themeFolderName": "twentytwentyfour",
        }

    def test_run_sql(self):
        """runSql wraps the statement as a literal resource."""
        step = RunSql("UPDATE wp_posts SET post_status = 'draft'", name="posts.sql")

        assert step.get_json_array() == {
            "step": "runSql",
            "sql": {
                "resource": "literal",
                "name": "posts.sql",
                "contents": "UPDATE wp_posts SET post_status = 'draft'",
            },
        }

    def test_meta_is_included_when_set(self):
        """Meta values ride along in the document."""
        step = SetSiteOptions({"blogname": "Shop"})
        assert "meta" not in step.get_json_array()

        step.set_meta_values({"alias": "generalSettings"})

        assert step.get_json_array()["meta"] == {"alias": "generalSettings"}
        assert step.get_meta_values() == {"alias": "generalSettings"}

    def test_equality_compares_documents(self):
        """Steps with the same document are equal."""
        assert SetSiteOptions({"a": 1}) == SetSiteOptions({"a": 1})
        assert SetSiteOptions({"a": 1}) != SetSiteOptions({"a": 2})


class TestStepSchemas:
    """Every step's own document validates against its schema."""

    def test_builtin_documents_validate(self):
        """Documents rendered by the built-in steps satisfy their schemas."""
        samples = [
            InstallPlugin("akismet", "wordpress.org/plugins", {"activate": False}),
            InstallTheme("twentytwentyfour", "wordpress.org/themes"),
            ActivatePlugin("akismet/akismet.php"),
            ActivateTheme("twentytwentyfour"),
            SetSiteOptions({"blogname": "Shop"}, meta={"alias": "general"}),
            RunSql("UPDATE wp_posts SET post_status = 'draft'"),
        ]
        assert [type(step) for step in samples] == BUILTIN_STEPS

        for step in samples:
            outcome = validate(step.get_json_array(), type(step).get_schema())
            assert outcome.valid, outcome.errors

    def test_step_name_is_pinned(self):
        """A document naming another step fails the schema."""
        outcome = validate({"step": "runSql", "options": {}}, SetSiteOptions.get_schema())

        assert not outcome.valid

    def test_missing_payload(self):
        """Required payload keys are enforced and reported with their path."""
        outcome = validate(
            {"step": "installPlugin", "pluginData": {"resource": "wordpress.org/plugins"}},
            InstallPlugin.get_schema(),
        )

        assert not outcome.valid
        assert outcome.errors == ["pluginData: 'slug' is a required property"]

    def test_run_sql_resource_must_be_literal(self):
        """runSql only accepts literal statement resources."""
        document = {
            "step": "runSql",
            "sql": {"resource": "url", "name": "x.sql", "contents": "UPDATE t SET a = 1"},
        }

        outcome = validate(document, RunSql.get_schema())

        assert not outcome.valid
        assert outcome.errors[0].startswith("sql/resource:")
