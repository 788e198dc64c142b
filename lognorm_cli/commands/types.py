import click
from rich.console import Console
from rich.table import Table

from ..runtime import load_runtime

console = Console()


@click.command()
@click.pass_context
def types(ctx):
    """List supported log types."""
    runtime = load_runtime(ctx)
    entries = runtime.registry.available_types()
    if not entries:
        console.print("No log types registered.")
        return

    table = Table(title="Log Types")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Reference", style="dim")

    for entry in entries:
        table.add_row(entry.name, entry.description, entry.reference_url)

    console.print(table)
