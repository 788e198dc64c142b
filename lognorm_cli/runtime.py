import click
from rich.console import Console

from lognorm.errors import LogNormError
from lognorm.main import Runtime, bootstrap

console = Console(stderr=True)


def load_runtime(ctx: click.Context) -> Runtime:
    obj = ctx.obj or {}
    try:
        return bootstrap(obj.get("config_path"), obj.get("log_level"))
    except (LogNormError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        ctx.exit(2)
