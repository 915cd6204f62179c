"""Process manager descriptor (procs.yml) read and write."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

PROCMGR_BINARY = "procmgr"


class ProcmgrError(Exception):
    """Raised when a descriptor cannot be read or written."""

    def __init__(self, code: str, message: str, suggestion: str | None = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


@dataclass
class Proc:
    """One supervised subprocess."""

    command: str
    args: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"command": self.command, "args": list(self.args)}

    @classmethod
    def from_dict(cls, data: dict) -> "Proc":
        return cls(command=data["command"], args=[str(a) for a in data.get("args") or []])


@dataclass
class Procs:
    """Named processes for procmgr to launch and keep alive."""

    processes: dict[str, Proc] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"processes": {name: proc.to_dict() for name, proc in self.processes.items()}}


def write_procs(path: Path, procs: Procs) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(procs.to_dict(), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ProcmgrError(
            code="PROCS_WRITE_FAILED",
            message=f"Unable to write process descriptor {path}: {e}",
        ) from e


def read_procs(path: Path) -> Procs:
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ProcmgrError(
            code="PROCS_READ_FAILED",
            message=f"Unable to read process descriptor {path}: {e}",
        ) from e

    try:
        processes = {
            name: Proc.from_dict(proc) for name, proc in (data.get("processes") or {}).items()
        }
    except (AttributeError, KeyError, TypeError) as e:
        raise ProcmgrError(
            code="INVALID_PROCS",
            message=f"Malformed process descriptor {path}: {e}",
        ) from e

    return Procs(processes=processes)


def start_command(procs_file: Path) -> str:
    """Command that launches procmgr against a descriptor."""
    return f"{PROCMGR_BINARY} {procs_file}"
