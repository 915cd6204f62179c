"""Tests for generated php.ini, php-fpm.conf, httpd.conf and nginx.conf."""

from phpweb.config import BuildSettings, PhpConfig
from phpweb.services.httpd_service import HttpdService
from phpweb.services.nginx_service import NginxService
from phpweb.services.php_service import FPM_LISTEN, PhpService


class TestPhpService:
    """Tests for PhpService."""

    def test_include_path_without_php_home(self, app_root):
        service = PhpService(app_root, PhpConfig(), BuildSettings())

        assert service.include_path() == str(app_root / "lib")

    def test_include_path_with_php_home(self, app_root):
        settings = BuildSettings(php_home="/layers/php-binary/php")
        service = PhpService(app_root, PhpConfig(lib_directory="vendor"), settings)

        assert service.include_path() == f"/layers/php-binary/php/lib/php:{app_root / 'vendor'}"

    def test_php_ini(self, app_root):
        settings = BuildSettings(php_extension_dir="/layers/php-binary/php/lib/php/extensions")
        content = PhpService(app_root, PhpConfig(), settings).render_php_ini()

        assert content.startswith("[PHP]\n")
        assert f'include_path = "{app_root / "lib"}"\n' in content
        assert 'extension_dir = "/layers/php-binary/php/lib/php/extensions"\n' in content
        assert "error_log = /proc/self/fd/2" in content

    def test_php_ini_without_extension_dir(self, app_root):
        content = PhpService(app_root, PhpConfig(), BuildSettings()).render_php_ini()

        assert "extension_dir" not in content
        assert '"\nenable_dl = Off' in content

    def test_php_fpm_conf(self, app_root, tmp_path):
        layer_root = tmp_path / "layers" / "php-web"
        service = PhpService(app_root, PhpConfig(), BuildSettings())

        path = service.write_php_fpm_conf(layer_root)

        content = path.read_text()
        assert path == layer_root / "etc" / "php-fpm.conf"
        assert f"pid = {layer_root}/php-fpm.pid" in content
        assert f"listen = {FPM_LISTEN}" in content
        assert "daemonize = no" in content
        assert content.rstrip().endswith(f"include={app_root}/.php.fpm.d/*.conf")


class TestHttpdService:
    """Tests for HttpdService."""

    def test_document_root_and_admin(self, app_root):
        config = PhpConfig(web_directory="public", server_admin="ops@example.com")

        content = HttpdService(app_root, config).render()

        assert f'DocumentRoot "{app_root}/public"' in content
        assert 'ServerAdmin "ops@example.com"' in content
        assert 'Listen "${PORT}"' in content
        assert f"SetHandler proxy:fcgi://{FPM_LISTEN}" in content
        assert '<FilesMatch "\\.php$">' in content

    def test_https_redirect(self, app_root):
        content = HttpdService(app_root, PhpConfig()).render()

        assert "RewriteCond %{HTTP:X-Forwarded-Proto} =http" in content

    def test_no_https_redirect(self, app_root):
        content = HttpdService(app_root, PhpConfig(enable_https_redirect=False)).render()

        assert "RewriteEngine" not in content

    def test_write_config(self, app_root):
        service = HttpdService(app_root, PhpConfig())

        path = service.write_config()

        assert path == app_root / "httpd.conf"
        assert path.read_text() == service.render()


class TestNginxService:
    """Tests for NginxService."""

    def test_render(self, app_root):
        content = NginxService(app_root, PhpConfig(web_directory="public")).render()

        assert "daemon off;" in content
        assert f"root {app_root}/public;" in content
        assert "listen {{port}} default_server;" in content
        assert f"server {FPM_LISTEN};" in content
        assert "location ~ \\.php$ {" in content

    def test_https_redirect_toggle(self, app_root):
        with_redirect = NginxService(app_root, PhpConfig()).render()
        without_redirect = NginxService(app_root, PhpConfig(enable_https_redirect=False)).render()

        assert "return 301 https://$http_host$request_uri;" in with_redirect
        assert "$redirect_to_https" not in without_redirect

    def test_write_config(self, app_root):
        path = NginxService(app_root, PhpConfig()).write_config()

        assert path == app_root / "nginx.conf"
        assert (app_root / "logs").is_dir()
