import click

from lognorm import __version__

from .commands.parse import parse
from .commands.schema import schema
from .commands.types import types


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=None, help="Path to the YAML config file")
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx, config_path, log_level):
    """lognorm - Security log normalization"""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level


cli.add_command(types)
cli.add_command(schema)
cli.add_command(parse)

if __name__ == "__main__":
    cli()
