"""Main CLI entry point for the PHP web buildpack."""

import click

from phpweb import __version__
from phpweb.output import OutputFormatter


@click.group()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (defaults to BP_LOG_LEVEL, then INFO)",
)
@click.version_option(version=__version__, prog_name="phpweb")
@click.pass_context
def cli(ctx: click.Context, output_json: bool, log_level: str | None) -> None:
    """phpweb - run PHP web applications and scripts.

    Implements the detect and build phases of a Cloud Native Buildpack.
    Use --json flag for machine-readable output.
    """
    ctx.ensure_object(dict)
    ctx.obj["formatter"] = OutputFormatter(json_mode=output_json)
    ctx.obj["log_level"] = log_level


# Import and register commands
from phpweb.commands.detect import detect  # noqa: E402
from phpweb.commands.build import build  # noqa: E402

cli.add_command(detect)
cli.add_command(build)
