"""Layer directories and launch metadata handed to the build phase."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import toml

LAUNCH_METADATA = "launch.toml"


@dataclass(frozen=True)
class Process:
    """A process type and the shell command that starts it."""

    type: str
    command: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "command": self.command}


class Layer:
    """A writable directory owned by one dependency."""

    def __init__(self, layers_root: Path, name: str) -> None:
        self.name = name
        self.root = Path(layers_root) / name
        self.metadata_path = Path(layers_root) / f"{name}.toml"

    def __repr__(self) -> str:
        return f"Layer(name={self.name!r}, root={str(self.root)!r})"

    def override_shared_env(self, name: str, value: str) -> Path:
        """Set NAME to value for both build and launch, replacing earlier values."""
        env_dir = self.root / "env"
        env_dir.mkdir(parents=True, exist_ok=True)
        env_file = env_dir / f"{name}.override"
        env_file.write_text(value)
        return env_file

    def write_metadata(
        self,
        metadata: dict[str, Any],
        launch: bool = False,
        build: bool = False,
        cache: bool = False,
    ) -> Path:
        """Write <layers>/<name>.toml with the layer flags and metadata table."""
        self.root.mkdir(parents=True, exist_ok=True)
        content = {
            "launch": launch,
            "build": build,
            "cache": cache,
            "metadata": metadata,
        }
        self.metadata_path.write_text(toml.dumps(content))
        return self.metadata_path

    def read_metadata(self) -> dict[str, Any]:
        if not self.metadata_path.exists():
            return {}
        return toml.loads(self.metadata_path.read_text())


class Layers:
    """The build phase's layers directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def layer(self, name: str) -> Layer:
        return Layer(self.root, name)

    @property
    def launch_metadata_path(self) -> Path:
        return self.root / LAUNCH_METADATA

    def write_application_metadata(self, processes: list[Process]) -> Path:
        """Write launch.toml declaring the app's process types."""
        self.root.mkdir(parents=True, exist_ok=True)
        content = {"processes": [p.to_dict() for p in processes]}
        self.launch_metadata_path.write_text(toml.dumps(content))
        return self.launch_metadata_path

    def read_application_metadata(self) -> list[Process]:
        if not self.launch_metadata_path.exists():
            return []
        data = toml.loads(self.launch_metadata_path.read_text())
        return [Process(type=p["type"], command=p["command"]) for p in data.get("processes", [])]
