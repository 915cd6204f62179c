"""phpweb - Cloud Native Buildpack that runs PHP web apps and scripts."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("phpweb")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
