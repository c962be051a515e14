"""Shared utility functions for temploy.

Provides async command execution for the git/docker/deploy glue, the
kebab-case name normaliser used for destination directories, and Rich-based
console reporting.
"""

from __future__ import annotations

import asyncio
import re

from rich.console import Console

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(cmd: list[str], timeout: int = 120) -> tuple[int, str, str]:
    """Run an external tool and capture its output.

    Args:
        cmd: Executable followed by its arguments.
        timeout: Maximum wall-clock seconds before the process is killed.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timeout yields a
        return code of ``-1`` with the reason in *stderr*; a missing
        executable yields ``127``.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        return (127, "", f"Command not found: {exc.filename or cmd[0]}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def to_kebab_case(name: str) -> str:
    """Convert an arbitrary project name to a filesystem-safe segment.

    * camelCase / PascalCase humps become word boundaries.
    * Any run of characters other than letters and digits (Unicode
      included) becomes a single hyphen.
    * The result is lowercased with leading/trailing hyphens stripped.

    Examples::

        to_kebab_case("demo")            -> "demo"
        to_kebab_case("My Project")      -> "my-project"
        to_kebab_case("myProject_v2")    -> "my-project-v2"
        to_kebab_case("test-data-clone") -> "test-data-clone"
        to_kebab_case("Café App")        -> "café-app"
    """
    result = re.sub(r"(.)([A-Z][a-z]+)", r"\1-\2", name.strip())
    result = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", result)
    result = re.sub(r"[\W_]+", "-", result)
    return result.strip("-").lower()


def format_bytes(size: int) -> str:
    """Format a byte count for humans.

    Examples::

        format_bytes(512)     -> "512 B"
        format_bytes(2048)    -> "2.0 KiB"
        format_bytes(5242880) -> "5.0 MiB"
    """
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
