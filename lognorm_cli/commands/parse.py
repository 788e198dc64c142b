import json

import click

from lognorm.pipeline import ParsePipeline

from ..runtime import console, load_runtime


@click.command()
@click.option("--log-type", "-t", required=True, help="Registered log type of the input")
@click.option("--max-errors", type=int, default=None, help="Abort after this many failed lines (0 never aborts)")
@click.argument("input_file", type=click.File("r"), default="-")
@click.pass_context
def parse(ctx, log_type, max_errors, input_file):
    """Parse log lines and print one JSON row per event."""
    runtime = load_runtime(ctx)
    if runtime.registry.get(log_type) is None:
        console.print(f"[bold red]Error:[/bold red] unknown log type {log_type!r}")
        ctx.exit(1)

    if max_errors is None:
        max_errors = runtime.config.ingest.max_errors

    with ParsePipeline(runtime.registry, log_type) as pipeline:
        for outcome in pipeline.run(input_file):
            if not outcome.ok:
                console.print(f"[yellow]line {outcome.line_number}:[/yellow] {outcome.error}")
                if max_errors and pipeline.stats.failures >= max_errors:
                    console.print(f"[bold red]Error:[/bold red] too many failures ({pipeline.stats.failures})")
                    ctx.exit(1)
                continue
            for event in outcome.events:
                click.echo(json.dumps(event.to_dict(), sort_keys=True))

        stats = pipeline.stats
        console.print(
            f"{stats.lines} lines, {stats.events} events, {stats.failures} failures",
            style="dim",
        )
