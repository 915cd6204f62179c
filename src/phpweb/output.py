"""Render detect and build results for humans (rich) or machines (--json)."""

import json
import sys
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from phpweb.services.build_detector import DetectionResult
from phpweb.services.contributor import LAYER_DISPLAY_NAME, ContributionResult


class OutputFormatter:
    """Writes phase results to stdout. Logs go to stderr separately."""

    def __init__(self, json_mode: bool = False) -> None:
        self.json_mode = json_mode
        self.console = Console()

    def detection(self, result: DetectionResult) -> None:
        """Report a passing detection and the plan it wrote."""
        build_type = result.build_type.value
        data: dict[str, Any] = {
            "type": build_type,
            "dependencies": list(result.plan.dependencies) if result.plan else [],
        }
        if result.web_directory:
            data["web_directory"] = result.web_directory
        if result.script_path:
            data["script"] = str(result.script_path)

        self.success(data, message=f"Detected PHP {build_type} application")

    def contribution(self, result: ContributionResult) -> None:
        """Report what the build phase wrote and the process types it declared."""
        if result.processes:
            message = f"Contributed {LAYER_DISPLAY_NAME}"
        else:
            message = f"Contributed {LAYER_DISPLAY_NAME} without a start command"

        if self.json_mode:
            self._json_output(
                True,
                data={
                    "web_app": result.web_app,
                    "web_server": result.web_server,
                    "processes": [p.to_dict() for p in result.processes],
                    "procs_file": str(result.procs_file) if result.procs_file else None,
                    "files": [str(f) for f in result.files],
                },
                message=message,
            )
            return

        self._pretty_success(
            {
                "web app": "yes" if result.web_app else "no",
                "web server": result.web_server or "(none)",
            },
            message,
        )
        if result.processes:
            table = Table(title="Process types", show_header=True, header_style="bold cyan")
            table.add_column("Type")
            table.add_column("Command")
            for process in result.processes:
                table.add_row(escape(process.type), escape(process.command))
            self.console.print(table)

    def success(self, data: dict[str, Any] | None, message: str) -> None:
        """Output a success response."""
        if self.json_mode:
            self._json_output(True, data=data, message=message)
        else:
            self._pretty_success(data, message)

    def error(
        self,
        code: str,
        message: str,
        suggestion: str | None = None,
        exit_code: int = 1,
    ) -> None:
        """Output an error response and exit with the phase's error status."""
        if self.json_mode:
            self._json_output(
                False,
                error={"code": code, "message": message, "suggestion": suggestion},
            )
        else:
            self._pretty_error(code, message, suggestion)
        sys.exit(exit_code)

    def _json_output(
        self,
        success: bool,
        data: Any = None,
        message: str | None = None,
        error: dict[str, Any] | None = None,
    ) -> None:
        output: dict[str, Any] = {
            "success": success,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }

        if success:
            output["data"] = data
            output["message"] = message
        else:
            output["error"] = error

        print(json.dumps(output, indent=2))

    def _pretty_success(self, data: dict[str, Any] | None, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")
        for key, value in (data or {}).items():
            if isinstance(value, list):
                value = ", ".join(value) or "(none)"
            self.console.print(f"  [cyan]{key}:[/cyan] {escape(str(value))}")

    def _pretty_error(self, code: str, message: str, suggestion: str | None) -> None:
        error_text = Text()
        error_text.append("Error: ", style="bold red")
        error_text.append(f"[{code}] ", style="red")
        error_text.append(message)

        self.console.print(error_text)

        if suggestion:
            self.console.print(f"[yellow]Suggestion:[/yellow] {suggestion}")
