"""Application type detection for the PHP web buildpack."""

import fnmatch
import logging
import os
from enum import Enum
from pathlib import Path
from typing import NamedTuple

from phpweb.config import PhpConfig
from phpweb.services.build_plan import BuildPlan, script_plan, web_plan
from phpweb.services.fs_walk import WalkAction, WalkEntry, walk_tree

logger = logging.getLogger(__name__)


class BuildType(Enum):
    """Detected application types."""

    WEB = "web"
    SCRIPT = "script"
    NONE = "none"


class DetectionResult(NamedTuple):
    """Result of application detection."""

    build_type: BuildType
    plan: BuildPlan | None = None
    web_directory: str | None = None
    script_path: Path | None = None  # First .php file found when build_type is SCRIPT

    @property
    def passed(self) -> bool:
        return self.build_type is not BuildType.NONE


class DetectionError(Exception):
    """Raised when the application root cannot be inspected."""

    def __init__(self, code: str, message: str, suggestion: str | None = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


def search_for_web_app(app_root: Path, web_directory: str) -> bool:
    """Check for at least one *.php entry directly inside the web directory.

    Dotfiles such as .index.php count. A missing web directory is not an error.

    Raises:
        DetectionError: If the web directory cannot be listed
    """
    web_root = Path(app_root) / web_directory
    try:
        with os.scandir(web_root) as it:
            return any(fnmatch.fnmatchcase(entry.name, "*.php") for entry in it)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as e:
        raise DetectionError(
            code="WEB_DIRECTORY_UNREADABLE",
            message=f"Unable to search {web_root} for PHP files: {e}",
        ) from e


def search_for_script(app_root: Path) -> Path | None:
    """Return the first regular *.php file under app_root, or None.

    Unreadable directories are logged and skipped.

    Raises:
        DetectionError: If app_root itself cannot be walked
    """
    found: list[Path] = []

    def visit(entry: WalkEntry) -> WalkAction:
        if entry.error is not None:
            logger.info(f"failure accessing a path {str(entry.path)!r}: {entry.error}")
            return WalkAction.SKIP
        if entry.is_file and entry.path.name.endswith(".php"):
            found.append(entry.path)
            return WalkAction.STOP
        return WalkAction.CONTINUE

    try:
        walk_tree(app_root, visit)
    except OSError as e:
        raise DetectionError(
            code="APP_ROOT_UNREADABLE",
            message=f"Unable to walk application root {app_root}: {e}",
            suggestion="Make sure the application directory exists and is readable",
        ) from e

    return found[0] if found else None


class BuildDetector:
    """Decide whether an application is a PHP web app, a PHP script, or neither."""

    def detect(self, app_root: Path, config: PhpConfig) -> DetectionResult:
        """
        Detect the application type.

        Priority order:
        1. Web app: <app_root>/<web_directory>/*.php exists
        2. Script: any *.php file anywhere under app_root
        3. None

        Args:
            app_root: Path to the application directory
            config: The application's buildpack.yml settings

        Returns:
            DetectionResult carrying the build plan when detection passes
        """
        app_root = Path(app_root)
        web_directory = config.web_directory

        if search_for_web_app(app_root, web_directory):
            logger.debug(f"Found PHP files in {app_root / web_directory}")
            return DetectionResult(
                build_type=BuildType.WEB,
                plan=web_plan(),
                web_directory=web_directory,
            )

        script = search_for_script(app_root)
        if script is not None:
            logger.debug(f"Found PHP script {script}")
            return DetectionResult(
                build_type=BuildType.SCRIPT,
                plan=script_plan(),
                script_path=script,
            )

        return DetectionResult(build_type=BuildType.NONE)
