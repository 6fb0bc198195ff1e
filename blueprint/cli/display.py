"""Rich display functions for the blueprint CLI."""

from typing import Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from blueprint.cli.errors import BlueprintCLIError, ImportRejectedError, ProfileLoadError
from blueprint.exceptions import BlueprintError, SecurityRejection

console = Console()

LEVEL_STYLES = {
    "debug": "dim",
    "info": "white",
    "warn": "yellow",
    "error": "red",
}


# Success Display Functions
def display_export_success(step_count: int, output_path: str) -> None:
    """Display a written export with Rich formatting.

    Args:
        step_count: Number of steps in the exported document
        output_path: File the document was written to
    """
    console.print("✅ [bold green]Blueprint exported successfully[/bold green]")

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("Property", style="cyan", width=12)
    table.add_column("Value", style="white")
    table.add_row("Steps", str(step_count))
    table.add_row("Output", output_path)
    console.print(table)


def display_import_results(rows: List[Dict[str, str]], processed: bool) -> None:
    """Display the messages of an import run.

    Args:
        rows: Formatted result rows ({"step", "type", "message"})
        processed: Whether every step succeeded
    """
    if rows:
        table = Table(show_header=True, header_style="bold blue")
        table.add_column("Step", style="cyan")
        table.add_column("Type", width=6)
        table.add_column("Message", style="white")
        for row in rows:
            style = LEVEL_STYLES.get(row["type"], "white")
            table.add_row(
                escape(row["step"]), f"[{style}]{row['type']}[/{style}]", escape(row["message"])
            )
        console.print(table)

    if processed:
        console.print("✅ [bold green]Blueprint imported successfully[/bold green]")
    else:
        console.print("❌ [bold red]Blueprint import finished with errors[/bold red]")


def display_steps_list(step_names: List[str], groups: List[Dict[str, str]]) -> None:
    """Display registered step types and the exporters available for export."""
    console.print("📋 [bold blue]Step types[/bold blue]")
    for name in step_names:
        console.print(f"  • [cyan]{name}[/cyan]")

    table = Table(show_header=True, header_style="bold blue", title="Exporters")
    table.add_column("Id", style="cyan")
    table.add_column("Label", style="white")
    table.add_column("Description", style="dim")
    for group in groups:
        table.add_row(group["id"], group["label"], group["description"])
    console.print(table)


def display_sql_check(rejection: Optional[SecurityRejection]) -> None:
    """Display the verdict of the statement gates."""
    if rejection is None:
        console.print("✅ [bold green]Statement allowed[/bold green]")
        return

    console.print(f"❌ [bold red]Statement rejected[/bold red] ([cyan]{rejection.gate}[/cyan])")
    console.print(f"🔍 [dim]{escape(rejection.message)}[/dim]")


# Error Display Functions
def display_blueprint_error(error: BlueprintError, context: str = "") -> None:
    """Display a domain error with its suggested actions.

    Args:
        error: BlueprintError that occurred
        context: Optional context about where the error occurred
    """
    context_text = f" during {context}" if context else ""
    console.print(f"❌ [bold red]Error{context_text}[/bold red]")
    console.print(f"🔍 [dim]{escape(error.message)}[/dim]")

    if error.suggested_actions:
        console.print("💡 [bold yellow]Suggestions:[/bold yellow]")
        for suggestion in error.suggested_actions:
            console.print(f"   • {suggestion}")


def display_cli_error(error: BlueprintCLIError) -> None:
    """Display a CLI error with the details its type carries."""
    console.print(f"❌ [bold red]{escape(error.message)}[/bold red]")

    if isinstance(error, ProfileLoadError):
        console.print(f"🔍 [dim]{escape(error.reason)}[/dim]")
    elif isinstance(error, ImportRejectedError):
        for reason in error.reasons:
            console.print(f"   • [red]{escape(reason)}[/red]")

    if error.suggestions:
        console.print("💡 [bold yellow]Suggestions:[/bold yellow]")
        for suggestion in error.suggestions:
            console.print(f"   • {suggestion}")


def display_generic_error(error: Exception, context: str = "") -> None:
    """Display generic error with context."""
    context_text = f" during {context}" if context else ""
    console.print(f"❌ [bold red]Error{context_text}[/bold red]")
    console.print(f"🔍 [dim]{escape(str(error))}[/dim]")


def display_warning(message: str) -> None:
    """Display warning message."""
    console.print(f"⚠️  [bold yellow]{escape(message)}[/bold yellow]")
