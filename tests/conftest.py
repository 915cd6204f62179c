"""Shared fixtures for buildpack tests."""

from pathlib import Path

import pytest

from phpweb.services.layers import Layers


def _write_file(path: Path, content: str | bytes = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content)
    return path


@pytest.fixture
def write_file():
    """Write a file, creating parent directories as needed."""
    return _write_file


@pytest.fixture
def app_root(tmp_path):
    """An empty application directory."""
    root = tmp_path / "application"
    root.mkdir()
    return root


@pytest.fixture
def layers(tmp_path):
    """A layers directory for the build phase."""
    root = tmp_path / "layers"
    root.mkdir()
    return Layers(root)


@pytest.fixture
def web_app(app_root):
    """An application with htdocs/index.php."""
    _write_file(app_root / "htdocs" / "index.php", "<?php echo 'hi';")
    return app_root
