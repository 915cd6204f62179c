"""Nginx configuration for proxying PHP requests to FPM."""

import logging
from pathlib import Path

from jinja2 import Template

from phpweb.config import PhpConfig
from phpweb.services.php_service import FPM_LISTEN
from phpweb.services.procmgr import Proc

logger = logging.getLogger(__name__)

NGINX_CONF_NAME = "nginx.conf"

# {{port}} is left in the output for the nginx buildpack to fill in at launch
NGINX_CONF_TEMPLATE = """# Managed by phpweb - regenerated on every build
daemon off;
worker_processes auto;
error_log stderr notice;
pid {{ app_root }}/logs/nginx.pid;

events {
    worker_connections 1024;
}

http {
    include mime.types;
    default_type application/octet-stream;
    access_log /dev/stdout;
    sendfile on;
    keepalive_timeout 65;
    port_in_redirect off;
    server_tokens off;
    client_body_temp_path {{ app_root }}/logs/client_body_temp;
    fastcgi_temp_path {{ app_root }}/logs/fastcgi_temp;

    upstream php_fpm {
        server {{ fpm_listen }};
    }
{% if enable_https_redirect %}
    map $http_x_forwarded_proto $redirect_to_https {
        default no;
        http yes;
    }
{% endif %}
    server {
        listen {% raw %}{{port}}{% endraw %} default_server;
        server_name _;
        root {{ document_root }};
        index index.php index.html index.htm;
{% if enable_https_redirect %}
        if ($redirect_to_https = "yes") {
            return 301 https://$http_host$request_uri;
        }
{% endif %}
        location / {
            try_files $uri $uri/ /index.php$is_args$args;
        }

        location ~ \\.php$ {
            try_files $uri =404;
            fastcgi_split_path_info ^(.+\\.php)(/.+)$;
            include fastcgi_params;
            fastcgi_param SCRIPT_FILENAME $document_root$fastcgi_script_name;
            fastcgi_param HTTPS $https if_not_empty;
            fastcgi_pass php_fpm;
        }

        location ~ /\\. {
            deny all;
        }
    }
}
"""


class NginxService:
    """Generate nginx.conf at the application root and describe the nginx process."""

    def __init__(self, app_root: Path, config: PhpConfig) -> None:
        self.app_root = Path(app_root)
        self.config = config

    @property
    def config_path(self) -> Path:
        return self.app_root / NGINX_CONF_NAME

    def render(self) -> str:
        template = Template(NGINX_CONF_TEMPLATE, keep_trailing_newline=True)
        return template.render(
            app_root=self.app_root,
            document_root=self.app_root / self.config.web_directory,
            enable_https_redirect=self.config.enable_https_redirect,
            fpm_listen=FPM_LISTEN,
        )

    def write_config(self) -> Path:
        self.config_path.write_text(self.render())
        (self.app_root / "logs").mkdir(exist_ok=True)
        logger.debug(f"Wrote {self.config_path}")
        return self.config_path

    def proc(self) -> Proc:
        return Proc(
            command="nginx",
            args=["-p", str(self.app_root), "-c", str(self.config_path)],
        )
