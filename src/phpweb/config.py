"""Configuration management for the PHP web buildpack."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

BUILDPACK_YAML = "buildpack.yml"

DEFAULT_WEB_DIRECTORY = "htdocs"
DEFAULT_LIB_DIRECTORY = "lib"
DEFAULT_SERVER_ADMIN = "admin@localhost"
DEFAULT_CLI_SCRIPTS = ("app.php", "main.php", "run.php", "start.php")


class WebServer(Enum):
    """Web servers the buildpack knows how to wire up."""

    PHP_SERVER = "php-server"
    HTTPD = "httpd"
    NGINX = "nginx"

    @classmethod
    def resolve(cls, value: str | None) -> "WebServer | None":
        """Map a configured value to a server.

        An empty value selects the default (HTTPD). Anything that is not a
        known server returns None so callers must handle it explicitly.
        """
        if not value:
            return cls.HTTPD
        try:
            return cls(value)
        except ValueError:
            return None


class ConfigError(Exception):
    """Raised when buildpack.yml cannot be loaded."""

    def __init__(self, code: str, message: str, suggestion: str | None = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


@dataclass(frozen=True)
class PhpConfig:
    """The `php` section of an application's buildpack.yml."""

    web_directory: str = DEFAULT_WEB_DIRECTORY
    web_server: str = WebServer.HTTPD.value
    script: str = ""
    lib_directory: str = DEFAULT_LIB_DIRECTORY
    server_admin: str = DEFAULT_SERVER_ADMIN
    enable_https_redirect: bool = True

    @property
    def server(self) -> WebServer | None:
        return WebServer.resolve(self.web_server)

    @classmethod
    def load(cls, app_root: Path) -> "PhpConfig":
        """Load configuration from <app_root>/buildpack.yml, falling back to defaults.

        Raises:
            ConfigError: If the file exists but is unreadable or malformed
        """
        config_path = Path(app_root) / BUILDPACK_YAML
        if not config_path.exists():
            return cls()

        try:
            # Binary mode lets PyYAML report bad encodings as a YAMLError
            with open(config_path, "rb") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(
                code="INVALID_BUILDPACK_YML",
                message=f"Unable to parse {config_path}: {e}",
                suggestion="Check buildpack.yml for YAML syntax errors",
            ) from e
        except OSError as e:
            raise ConfigError(
                code="BUILDPACK_YML_UNREADABLE",
                message=f"Unable to read {config_path}: {e}",
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                code="INVALID_BUILDPACK_YML",
                message=f"{config_path} must contain a mapping at the top level",
            )

        section = data.get("php") or {}
        if not isinstance(section, dict):
            raise ConfigError(
                code="INVALID_BUILDPACK_YML",
                message="The 'php' section of buildpack.yml must be a mapping",
                suggestion="Use keys such as php.webdirectory, php.webserver and php.script",
            )

        return cls._from_dict(section)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "PhpConfig":
        """Create config from the `php` mapping."""
        kwargs: dict[str, Any] = {}

        # Map YAML keys to dataclass fields
        mappings = {
            "webdirectory": "web_directory",
            "webserver": "web_server",
            "script": "script",
            "libdirectory": "lib_directory",
            "serveradmin": "server_admin",
            "enable_https_redirect": "enable_https_redirect",
        }

        for yaml_key, field_name in mappings.items():
            value = data.get(yaml_key)
            if value is None or value == "":
                continue
            if field_name == "enable_https_redirect":
                if isinstance(value, str):
                    value = value.strip().lower() in ("true", "yes", "on", "1")
                kwargs[field_name] = bool(value)
            else:
                kwargs[field_name] = str(value)

        for field_name in ("web_directory", "script", "lib_directory"):
            if field_name in kwargs:
                _validate_relative(field_name, kwargs[field_name])

        return cls(**kwargs)


def _validate_relative(field_name: str, value: str) -> None:
    path = PurePosixPath(value)
    if path.is_absolute() or ".." in path.parts:
        raise ConfigError(
            code="INVALID_PATH",
            message=f"{field_name} '{value}' must be a path relative to the application root",
            suggestion="Remove leading '/' and any '..' components",
        )


@dataclass
class BuildSettings:
    """Ambient settings taken from the environment and the platform directory."""

    log_level: str = "INFO"
    php_home: str | None = None
    php_extension_dir: str | None = None
    platform_env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, platform_dir: Path | None = None) -> "BuildSettings":
        """Resolve settings from os.environ, then <platform>/env/<NAME> files."""
        platform_env = read_platform_env(platform_dir) if platform_dir else {}

        def lookup(name: str) -> str | None:
            return os.environ.get(name) or platform_env.get(name) or None

        log_level = lookup("BP_LOG_LEVEL") or "INFO"
        if lookup("BP_DEBUG"):
            log_level = "DEBUG"

        return cls(
            log_level=log_level.upper(),
            php_home=lookup("PHP_HOME"),
            php_extension_dir=lookup("PHP_EXTENSION_DIR"),
            platform_env=platform_env,
        )


def read_platform_env(platform_dir: Path) -> dict[str, str]:
    """Read <platform>/env, where each file name is a variable and its content the value."""
    env_dir = Path(platform_dir) / "env"
    if not env_dir.is_dir():
        return {}

    values = {}
    for path in sorted(env_dir.iterdir()):
        if not path.is_file():
            continue
        try:
            values[path.name] = path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(
                code="PLATFORM_ENV_UNREADABLE",
                message=f"Unable to read platform variable {path}: {e}",
            ) from e
    return values
