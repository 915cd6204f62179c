"""php.ini and php-fpm.conf generation."""

import logging
from pathlib import Path

from jinja2 import Template

from phpweb.config import BuildSettings, PhpConfig

logger = logging.getLogger(__name__)

FPM_LISTEN = "127.0.0.1:9000"

PHP_INI_TEMPLATE = """[PHP]
engine = On
short_open_tag = Off
precision = 14
output_buffering = 4096
zlib.output_compression = Off
implicit_flush = Off
serialize_precision = -1
zend.enable_gc = On
expose_php = Off
max_execution_time = 30
max_input_time = 60
memory_limit = 128M
error_reporting = E_ALL & ~E_DEPRECATED & ~E_STRICT
display_errors = Off
display_startup_errors = Off
log_errors = On
error_log = /proc/self/fd/2
variables_order = "GPCS"
request_order = "GP"
register_argc_argv = Off
auto_globals_jit = On
post_max_size = 8M
default_mimetype = "text/html"
default_charset = "UTF-8"
include_path = "{{ include_path }}"
{%- if extension_dir %}
extension_dir = "{{ extension_dir }}"
{%- endif %}
enable_dl = Off
file_uploads = On
upload_max_filesize = 2M
max_file_uploads = 20
allow_url_fopen = On
allow_url_include = Off
default_socket_timeout = 60

[Date]
date.timezone = UTC

[Session]
session.save_handler = files
session.use_strict_mode = 0
session.use_cookies = 1
session.use_only_cookies = 1
session.name = PHPSESSID
session.cookie_httponly = 1
session.gc_maxlifetime = 1440
"""

PHP_FPM_TEMPLATE = """[global]
pid = {{ layer_root }}/php-fpm.pid
error_log = /proc/self/fd/2
daemonize = no

[www]
listen = {{ listen }}
pm = dynamic
pm.max_children = 5
pm.start_servers = 2
pm.min_spare_servers = 1
pm.max_spare_servers = 3
clear_env = no
catch_workers_output = yes
decorate_workers_output = no
php_admin_value[include_path] = {{ include_path }}

include={{ user_include }}
"""


class PhpService:
    """Render the PHP interpreter and FPM configuration for an application."""

    def __init__(self, app_root: Path, config: PhpConfig, settings: BuildSettings) -> None:
        self.app_root = Path(app_root)
        self.config = config
        self.settings = settings

    def include_path(self) -> str:
        lib_dir = str(self.app_root / self.config.lib_directory)
        if self.settings.php_home:
            return f"{Path(self.settings.php_home) / 'lib' / 'php'}:{lib_dir}"
        return lib_dir

    def render_php_ini(self) -> str:
        template = Template(PHP_INI_TEMPLATE, keep_trailing_newline=True)
        return template.render(
            include_path=self.include_path(),
            extension_dir=self.settings.php_extension_dir,
        )

    def render_php_fpm_conf(self, layer_root: Path) -> str:
        template = Template(PHP_FPM_TEMPLATE, keep_trailing_newline=True)
        return template.render(
            layer_root=layer_root,
            listen=FPM_LISTEN,
            include_path=self.include_path(),
            user_include=self.app_root / ".php.fpm.d" / "*.conf",
        )

    def write_php_ini(self, etc_dir: Path) -> Path:
        path = Path(etc_dir) / "php.ini"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render_php_ini())
        logger.debug(f"Wrote {path}")
        return path

    def write_php_fpm_conf(self, layer_root: Path) -> Path:
        path = Path(layer_root) / "etc" / "php-fpm.conf"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render_php_fpm_conf(layer_root))
        logger.debug(f"Wrote {path}")
        return path
