"""Detect phase: decide whether this buildpack applies to an application."""

import logging
import sys
from pathlib import Path

import click

from phpweb.config import BuildSettings, ConfigError, PhpConfig
from phpweb.log import setup_logging
from phpweb.output import OutputFormatter
from phpweb.services.build_detector import BuildDetector, DetectionError
from phpweb.services.build_plan import BuildPlanError, write_plan

logger = logging.getLogger(__name__)

DETECT_FAIL = 100
DETECT_ERROR = 101


@click.command("detect")
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
def detect(ctx: click.Context, platform_dir: Path, plan_path: Path, app_root: Path) -> None:
    """Detect a PHP web app or PHP script.

    Writes the build plan to PLAN_PATH and exits 0 when the application is
    recognized, exits 100 when it is not, and 101 on errors.

    Example:
        phpweb detect /platform /tmp/plan.toml
        phpweb detect --app-root ./myapp /platform /tmp/plan.toml
    """
    formatter: OutputFormatter = ctx.obj["formatter"]
    app_root = app_root.resolve()

    try:
        settings = BuildSettings.load(platform_dir)
        setup_logging(ctx.obj.get("log_level") or settings.log_level)

        config = PhpConfig.load(app_root)
        result = BuildDetector().detect(app_root, config)

        if not result.passed:
            logger.info(f"No PHP files found in {app_root}")
            sys.exit(DETECT_FAIL)

        write_plan(result.plan, plan_path)
        formatter.detection(result)

    except (ConfigError, DetectionError, BuildPlanError) as e:
        formatter.error(e.code, e.message, e.suggestion, exit_code=DETECT_ERROR)
