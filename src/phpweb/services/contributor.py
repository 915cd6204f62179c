"""Contribute the php-web layer: PHP config, web server config and start commands."""

import logging
import secrets
from dataclasses import dataclass, field
from pathlib import Path

from phpweb.config import DEFAULT_CLI_SCRIPTS, BuildSettings, PhpConfig, WebServer
from phpweb.services.build_detector import search_for_web_app
from phpweb.services.build_plan import SCRIPT_DEPENDENCY, WEB_DEPENDENCY, BuildPlan
from phpweb.services.httpd_service import HttpdService
from phpweb.services.layers import Layer, Layers, Process
from phpweb.services.nginx_service import NginxService
from phpweb.services.php_service import PhpService
from phpweb.services.procmgr import Proc, Procs, start_command, write_procs

logger = logging.getLogger(__name__)

LAYER_NAME = "php-web"
LAYER_DISPLAY_NAME = "PHP Web"
PROCS_FILE = "procs.yml"

MISSING_SCRIPT_WARNING = (
    "Buildpack could not find a file to execute. Either set php.script in buildpack.yml "
    "or include one of these files [{defaults}]"
).format(defaults=", ".join(DEFAULT_CLI_SCRIPTS))


class ContributionError(Exception):
    """Raised when the layer or application files cannot be written."""

    def __init__(self, code: str, message: str, suggestion: str | None = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


@dataclass
class LayerMetadata:
    """Layer metadata. The hash is random so the layer is never reused from cache."""

    name: str = LAYER_DISPLAY_NAME
    hash: str = field(default_factory=lambda: secrets.token_hex(32))

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "hash": self.hash}


@dataclass
class ContributionResult:
    """What a contribution produced."""

    web_app: bool
    web_server: str | None = None
    processes: list[Process] = field(default_factory=list)
    procs_file: Path | None = None
    files: list[Path] = field(default_factory=list)


class Contributor:
    """Materialize runtime configuration for a detected PHP application."""

    def __init__(
        self,
        app_root: Path,
        layers: Layers,
        config: PhpConfig,
        settings: BuildSettings | None = None,
    ) -> None:
        self.app_root = Path(app_root)
        self.layers = layers
        self.config = config
        self.settings = settings or BuildSettings()
        self.metadata = LayerMetadata()
        self.php = PhpService(self.app_root, config, self.settings)

    @staticmethod
    def wants(plan: BuildPlan) -> bool:
        """Whether the build plan asks for this buildpack's contribution."""
        return WEB_DEPENDENCY in plan or SCRIPT_DEPENDENCY in plan

    def contribute(self) -> ContributionResult:
        """Write the php-web layer and declare processes.

        Raises:
            ContributionError: If any file cannot be written
        """
        layer = self.layers.layer(LAYER_NAME)
        try:
            if search_for_web_app(self.app_root, self.config.web_directory):
                result = self.contribute_web_app(layer)
            else:
                result = self.contribute_script(layer)
            layer.write_metadata(self.metadata.to_dict(), launch=True)
            if result.processes:
                self.layers.write_application_metadata(result.processes)
        except OSError as e:
            raise ContributionError(
                code="CONTRIBUTION_FAILED",
                message=f"Unable to contribute {LAYER_NAME} layer: {e}",
            ) from e

        return result

    def contribute_web_app(self, layer: Layer) -> ContributionResult:
        result = ContributionResult(web_app=True, files=self._configure_php(layer))
        server = self.config.server
        web_root = self.app_root / self.config.web_directory

        if server is WebServer.PHP_SERVER:
            command = f"php -S 0.0.0.0:$PORT -t {web_root}"
            result.processes = [
                Process(type="task", command=command),
                Process(type="web", command=command),
            ]
        elif server is WebServer.HTTPD:
            httpd = HttpdService(self.app_root, self.config)
            result.files.append(self.php.write_php_fpm_conf(layer.root))
            result.files.append(httpd.write_config())
            self._declare_procmgr(layer, result, httpd.proc())
        elif server is WebServer.NGINX:
            nginx = NginxService(self.app_root, self.config)
            result.files.append(self.php.write_php_fpm_conf(layer.root))
            result.files.append(nginx.write_config())
            self._declare_procmgr(layer, result, nginx.proc())
        else:
            logger.debug(
                f"Web server '{self.config.web_server}' is not supported, no start command contributed"
            )
            return result

        result.web_server = server.value
        return result

    def contribute_script(self, layer: Layer) -> ContributionResult:
        result = ContributionResult(web_app=False, files=self._configure_php(layer))

        script = self.resolve_script()
        if script is None:
            logger.warning(MISSING_SCRIPT_WARNING)
            return result

        command = f"php {self.app_root / script}"
        result.processes = [
            Process(type="task", command=command),
            Process(type="web", command=command),
        ]
        return result

    def resolve_script(self) -> str | None:
        """Configured script, else the first default script present at the app root."""
        if self.config.script:
            return self.config.script

        for candidate in DEFAULT_CLI_SCRIPTS:
            if (self.app_root / candidate).exists():
                return candidate
        return None

    def _configure_php(self, layer: Layer) -> list[Path]:
        etc_dir = layer.root / "etc"
        php_ini = self.php.write_php_ini(etc_dir)
        layer.override_shared_env("PHPRC", str(etc_dir))
        layer.override_shared_env("PHP_INI_SCAN_DIR", str(self.app_root / ".php.ini.d"))
        return [php_ini]

    def _declare_procmgr(self, layer: Layer, result: ContributionResult, server_proc: Proc) -> None:
        fpm = Proc(
            command="php-fpm",
            args=[
                "-p", str(layer.root),
                "-y", str(layer.root / "etc" / "php-fpm.conf"),
                "-c", str(layer.root / "etc"),
            ],
        )
        procs_file = layer.root / PROCS_FILE
        write_procs(procs_file, Procs(processes={"php-fpm": fpm, server_proc.command: server_proc}))

        result.procs_file = procs_file
        result.files.append(procs_file)
        result.processes = [Process(type="web", command=start_command(procs_file))]
