import json

import click

from ..runtime import console, load_runtime


@click.command()
@click.argument("name")
@click.pass_context
def schema(ctx, name):
    """Print the JSON schema of the rows produced for a log type."""
    runtime = load_runtime(ctx)
    entry = runtime.registry.get(name)
    if entry is None:
        console.print(f"[bold red]Error:[/bold red] unknown log type {name!r}")
        ctx.exit(1)
    click.echo(json.dumps(entry.schema_descriptor(), indent=2, sort_keys=True))
