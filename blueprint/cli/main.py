"""Blueprint CLI.

Typer application wiring a profile to the export and import pipelines:

    blueprint --profile site.yml export --step setSiteOptions -o blueprint.json
    blueprint --profile site.yml import blueprint.json
    blueprint check-sql "UPDATE wp_posts SET post_status = 'draft'"
    blueprint steps
"""

import json
import os
import tempfile
from typing import List, Optional

import typer
from rich.console import Console

from blueprint.cli.display import (
    display_blueprint_error,
    display_cli_error,
    display_export_success,
    display_generic_error,
    display_import_results,
    display_sql_check,
    display_warning,
    display_steps_list,
)
from blueprint.cli.errors import BlueprintCLIError, ImportRejectedError, ProfileLoadError
from blueprint.config import BlueprintConfig, build_context, build_exporters, build_site
from blueprint.exceptions import BlueprintError
from blueprint.export_schema import ExportSchema
from blueprint.importers import create_builtin_importers
from blueprint.logging import configure_logging, get_logger, suppress_third_party_loggers
from blueprint.registry import StepProcessorRegistry
from blueprint.results import MessageLevel
from blueprint.security import SqlStepValidator
from blueprint.session import ImportSessionManager
from blueprint.zip_schema import ZipExportedSchema

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="blueprint",
    help="Blueprint CLI - Export and import site configuration",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        from blueprint import __version__

        console.print(f"Blueprint CLI v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="YAML profile describing the site"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Blueprint CLI - Export and import site configuration.

    Exports a site's plugins, themes, options and table rows as a schema
    document, and replays such documents step by step on another site.
    """
    try:
        config = BlueprintConfig.from_file(profile) if profile else BlueprintConfig()
    except BlueprintError as e:
        display_cli_error(ProfileLoadError(profile, e.message))
        raise typer.Exit(1)

    logging_section = config.section("logging")
    verbose = verbose or logging_section.get("verbose", False)
    quiet = (quiet or logging_section.get("quiet", False)) and not verbose
    configure_logging(verbose=verbose, quiet=quiet)
    suppress_third_party_loggers()

    ctx.obj = {"config": config, "verbose": verbose, "quiet": quiet}


def _config(ctx: typer.Context) -> BlueprintConfig:
    return ctx.obj["config"]


@app.command()
def export(
    ctx: typer.Context,
    step: Optional[List[str]] = typer.Option(
        None, "--step", "-s", help="Step name or alias to export (repeatable, default: all)"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the document to this file instead of stdout"
    ),
    zip_bundle: bool = typer.Option(
        False, "--zip", help="Write a zip bundle with the plugin and theme packages"
    ),
) -> None:
    """Export the site as a schema document."""
    config = _config(ctx)
    if zip_bundle and not output:
        display_cli_error(BlueprintCLIError("--zip requires --output"))
        raise typer.Exit(1)

    site = build_site(config)
    try:
        context = build_context(config, site)
        exporter = ExportSchema(
            context,
            build_exporters(config, context),
            landing_page=config.section("export").get("landing_page", "/"),
        )
        schema = exporter.export(step or [])

        if zip_bundle:
            ZipExportedSchema(schema, context.storages).zip(output)
        elif output:
            with open(output, "w", encoding="utf-8") as f:
                json.dump(schema, f, indent=2)
        else:
            typer.echo(json.dumps(schema, indent=2))
            return

        display_export_success(len(schema["steps"]), output)
        logger.info(f"Exported {len(schema['steps'])} steps to {output}")

    except BlueprintError as e:
        display_blueprint_error(e, "export")
        raise typer.Exit(1)
    except OSError as e:
        display_generic_error(e, "export")
        raise typer.Exit(1)
    finally:
        site.close()


@app.command("import")
def import_blueprint(
    ctx: typer.Context,
    file_path: str = typer.Argument(..., help="Schema document (.json) or bundle (.zip)"),
    messages: str = typer.Option(
        "info", "--messages", "-m", help="Lowest message level to show (debug, info, warn, error)"
    ),
) -> None:
    """Import a schema document into the site."""
    config = _config(ctx)
    import_section = config.section("import")

    try:
        with open(file_path, "rb") as f:
            payload = f.read()
    except OSError as e:
        display_cli_error(
            BlueprintCLIError(f"Cannot read '{file_path}': {e.strerror}", ["Check the file path"])
        )
        raise typer.Exit(1)

    site = build_site(config)
    try:
        with tempfile.TemporaryDirectory(prefix="blueprint-session-") as session_dir:
            manager = ImportSessionManager(
                build_context(config, site),
                session_dir=session_dir,
                max_payload_bytes=import_section["max_payload_bytes"],
                setup_mode=import_section["setup_mode"],
                allow_override=import_section["allow_override"],
            )
            queued = manager.queue(payload, os.path.basename(file_path))
            if queued["errors"]:
                raise ImportRejectedError(file_path, queued["errors"])

            if queued["settings_to_overwrite"] and not ctx.obj.get("quiet"):
                display_warning("Overwriting: " + ", ".join(queued["settings_to_overwrite"]))

            response = manager.process(queued["reference"])
            if not response["processed"] and not response["results"]:
                raise ImportRejectedError(file_path, [response["message"]])

        rows = [
            row
            for row in response["results"]
            if _at_least(row["type"], messages)
        ]
        display_import_results(rows, response["processed"])
        if not response["processed"]:
            raise typer.Exit(1)

    except BlueprintCLIError as e:
        display_cli_error(e)
        raise typer.Exit(1)
    finally:
        site.close()


def _at_least(level: str, minimum: str) -> bool:
    order = [member.value for member in MessageLevel]
    if minimum not in order:
        return True
    return order.index(level) >= order.index(minimum)


@app.command("check-sql")
def check_sql(
    ctx: typer.Context,
    statement: str = typer.Argument(..., help="SQL statement to check"),
) -> None:
    """Run a statement through the runSql security gates without executing it."""
    prefix = _config(ctx).section("site").get("table_prefix", "wp_")
    rejection = SqlStepValidator(prefix).find_violation(statement)
    display_sql_check(rejection)
    if rejection is not None:
        raise typer.Exit(1)


@app.command()
def steps(ctx: typer.Context) -> None:
    """List the registered step types and the available exporters."""
    config = _config(ctx)
    site = build_site(config)
    try:
        context = build_context(config, site)
        registry = StepProcessorRegistry(create_builtin_importers(context))
        groups = ExportSchema(context, build_exporters(config, context)).get_step_groups()
        display_steps_list(registry.get_step_names(), groups)
    finally:
        site.close()


def cli() -> None:
    """Entry point for the CLI application."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n⚠️  [yellow]Operation cancelled by user[/yellow]")
        raise SystemExit(130)


if __name__ == "__main__":
    cli()
