"""Build plan entries exchanged between the detect and build phases."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import toml

PHP_DEPENDENCY = "php-binary"
WEB_DEPENDENCY = "php-web"
SCRIPT_DEPENDENCY = "php-script"


class BuildPlanError(Exception):
    """Raised when a build plan cannot be read or written."""

    def __init__(self, code: str, message: str, suggestion: str | None = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


@dataclass
class Dependency:
    """A single plan entry."""

    name: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class BuildPlan:
    """Mapping of dependency name to its plan entry."""

    dependencies: dict[str, Dependency] = field(default_factory=dict)

    def add(self, name: str, **metadata: Any) -> "BuildPlan":
        self.dependencies[name] = Dependency(name=name, metadata=dict(metadata))
        return self

    def get(self, name: str) -> Dependency | None:
        return self.dependencies.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.dependencies

    def to_dict(self) -> dict[str, Any]:
        return {
            name: {"metadata": dict(dep.metadata)} if dep.metadata else {}
            for name, dep in self.dependencies.items()
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildPlan":
        """Accept both `{name: {metadata}}` tables and `[[entries]] name = ...` lists."""
        plan = cls()
        entries = data.get("entries")
        if isinstance(entries, list):
            for entry in entries:
                if isinstance(entry, dict) and entry.get("name"):
                    plan.add(entry["name"], **(entry.get("metadata") or {}))
            return plan

        for name, value in data.items():
            metadata = value.get("metadata", {}) if isinstance(value, dict) else {}
            plan.add(name, **metadata)
        return plan


def web_plan() -> BuildPlan:
    """Plan for an app that serves files from its web directory."""
    return BuildPlan().add(PHP_DEPENDENCY, launch=True).add(WEB_DEPENDENCY)


def script_plan() -> BuildPlan:
    """Plan for an app that runs a single PHP script."""
    return BuildPlan().add(PHP_DEPENDENCY, launch=True).add(SCRIPT_DEPENDENCY)


def write_plan(plan: BuildPlan, path: Path) -> None:
    """Write a plan as TOML."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(toml.dumps(plan.to_dict()))
    except OSError as e:
        raise BuildPlanError(
            code="PLAN_WRITE_FAILED",
            message=f"Unable to write build plan {path}: {e}",
        ) from e


def read_plan(path: Path) -> BuildPlan:
    """Read a TOML plan. A missing file is an empty plan."""
    path = Path(path)
    if not path.exists():
        return BuildPlan()

    try:
        data = toml.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, toml.TomlDecodeError) as e:
        raise BuildPlanError(
            code="PLAN_READ_FAILED",
            message=f"Unable to read build plan {path}: {e}",
        ) from e

    return BuildPlan.from_dict(data)
