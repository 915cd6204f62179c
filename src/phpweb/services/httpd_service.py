"""Apache HTTPD configuration for proxying PHP requests to FPM."""

import logging
from pathlib import Path

from jinja2 import Template

from phpweb.config import PhpConfig
from phpweb.services.php_service import FPM_LISTEN
from phpweb.services.procmgr import Proc

logger = logging.getLogger(__name__)

HTTPD_CONF_NAME = "httpd.conf"

# Listen/ServerRoot use httpd's own ${VAR} expansion at launch
HTTPD_CONF_TEMPLATE = """# Managed by phpweb - regenerated on every build
ServerRoot "${SERVER_ROOT}"
Listen "${PORT}"
ServerAdmin "{{ server_admin }}"
ServerName "0.0.0.0"
DocumentRoot "{{ document_root }}"

LoadModule authz_core_module modules/mod_authz_core.so
LoadModule authz_host_module modules/mod_authz_host.so
LoadModule log_config_module modules/mod_log_config.so
LoadModule env_module modules/mod_env.so
LoadModule setenvif_module modules/mod_setenvif.so
LoadModule dir_module modules/mod_dir.so
LoadModule mime_module modules/mod_mime.so
LoadModule reqtimeout_module modules/mod_reqtimeout.so
LoadModule unixd_module modules/mod_unixd.so
LoadModule mpm_event_module modules/mod_mpm_event.so
LoadModule proxy_module modules/mod_proxy.so
LoadModule proxy_fcgi_module modules/mod_proxy_fcgi.so
LoadModule remoteip_module modules/mod_remoteip.so
LoadModule rewrite_module modules/mod_rewrite.so

TypesConfig conf/mime.types
PidFile logs/httpd.pid
ErrorLog /proc/self/fd/2
LogFormat "%a %l %u %t \\"%r\\" %>s %b" common
CustomLog /proc/self/fd/1 common

RemoteIPHeader x-forwarded-for
RemoteIPInternalProxy 10.0.0.0/8 172.16.0.0/12 192.168.0.0/16

<Directory />
    AllowOverride None
    Require all denied
</Directory>

<Directory "{{ document_root }}">
    Options SymLinksIfOwnerMatch
    AllowOverride All
    Require all granted
</Directory>

<Files ".ht*">
    Require all denied
</Files>

DirectoryIndex index.php index.html index.htm
{% if enable_https_redirect %}
RewriteEngine On
RewriteCond %{HTTP:X-Forwarded-Proto} =http
RewriteRule .* https://%{HTTP:Host}%{REQUEST_URI} [L,R=301]
{% endif %}
<FilesMatch "\\.php$">
    SetHandler proxy:fcgi://{{ fpm_listen }}
</FilesMatch>

<Proxy "fcgi://{{ fpm_listen }}">
    ProxySet disablereuse=On retry=0
</Proxy>
"""


class HttpdService:
    """Generate httpd.conf at the application root and describe the httpd process."""

    def __init__(self, app_root: Path, config: PhpConfig) -> None:
        self.app_root = Path(app_root)
        self.config = config

    @property
    def config_path(self) -> Path:
        return self.app_root / HTTPD_CONF_NAME

    def render(self) -> str:
        template = Template(HTTPD_CONF_TEMPLATE, keep_trailing_newline=True)
        return template.render(
            server_admin=self.config.server_admin,
            document_root=self.app_root / self.config.web_directory,
            enable_https_redirect=self.config.enable_https_redirect,
            fpm_listen=FPM_LISTEN,
        )

    def write_config(self) -> Path:
        self.config_path.write_text(self.render())
        logger.debug(f"Wrote {self.config_path}")
        return self.config_path

    def proc(self) -> Proc:
        return Proc(
            command="httpd",
            args=["-f", str(self.config_path), "-k", "start", "-DFOREGROUND"],
        )
