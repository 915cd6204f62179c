"""Build phase: contribute the php-web layer and start commands."""

import logging
from pathlib import Path

import click

from phpweb.config import BuildSettings, ConfigError, PhpConfig
from phpweb.log import setup_logging
from phpweb.output import OutputFormatter
from phpweb.services.build_detector import DetectionError
from phpweb.services.build_plan import BuildPlanError, read_plan
from phpweb.services.contributor import ContributionError, Contributor
from phpweb.services.layers import Layers
from phpweb.services.procmgr import ProcmgrError

logger = logging.getLogger(__name__)

BUILD_ERROR = 101


@click.command("build")
@click.argument("layers_dir", type=click.Path(file_okay=False, path_type=Path))
@click.argument("platform_dir", type=click.Path(file_okay=False, path_type=Path))
@click.argument("plan_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--app-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Application directory",
)
@click.pass_context
def build(
    ctx: click.Context,
    layers_dir: Path,
    platform_dir: Path,
    plan_path: Path,
    app_root: Path,
) -> None:
    """Configure PHP and the web server, then declare process types.

    Writes php.ini and, for web apps, php-fpm.conf, the web server config and
    a procmgr descriptor. Exits 101 on errors.

    Example:
        phpweb build /layers /platform /tmp/plan.toml
    """
    formatter: OutputFormatter = ctx.obj["formatter"]
    app_root = app_root.resolve()
    layers = Layers(layers_dir.resolve())

    try:
        settings = BuildSettings.load(platform_dir)
        setup_logging(ctx.obj.get("log_level") or settings.log_level)

        plan = read_plan(plan_path)
        if not Contributor.wants(plan):
            logger.info("Build plan does not request php-web or php-script, nothing to contribute")
            formatter.success(data=None, message="Nothing to contribute")
            return

        config = PhpConfig.load(app_root)
        contributor = Contributor(app_root, layers, config, settings)
        result = contributor.contribute()

    except (
        BuildPlanError,
        ConfigError,
        DetectionError,
        ContributionError,
        ProcmgrError,
    ) as e:
        formatter.error(e.code, e.message, e.suggestion, exit_code=BUILD_ERROR)
        return

    formatter.contribution(result)
