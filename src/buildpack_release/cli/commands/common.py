"""Helpers shared by the command implementations."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from buildpack_release.github.actions import set_output

if TYPE_CHECKING:
    from rich.console import Console


def resolve_project_path(path: str | None) -> Path:
    """Resolve the project directory, relative paths against the current directory."""
    if path is None:
        return Path.cwd()
    project_path = Path(path)
    if project_path.is_absolute():
        return project_path
    return Path.cwd() / project_path


def fail(err_console: Console, error: Exception) -> SystemExit:
    """Print *error* and return the SystemExit to raise."""
    err_console.print(f"[red]Error:[/] {escape(str(error))}")
    return SystemExit(1)


def emit_output(
    name: str,
    value: str,
    github_output: Path | None,
    console: Console,
) -> None:
    """Print an output value and record it as a step output when running in CI."""
    console.print(value.rstrip("\n"), markup=False, highlight=False, emoji=False, soft_wrap=True)
    if github_output is not None:
        set_output(name, value, github_output)
