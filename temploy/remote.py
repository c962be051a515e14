"""Remote template support.

A template given as a repository URL is cloned into a cache directory keyed
by the URL's md5 before generation runs.  The clone directory then acts as
the template root, and the URL is kept only to derive the project name.
"""

from __future__ import annotations

import hashlib
import shutil
from pathlib import Path

from rich.markup import escape

from temploy.config import Config
from temploy.errors import CloneError
from temploy.utils import console, print_success, print_warning, run_command

_REMOTE_PREFIXES = ("http://", "https://", "ssh://", "git://", "git@")


def is_remote_template(value: str) -> bool:
    """Return ``True`` if *value* names a git repository rather than a directory."""
    return value.endswith(".git") or value.startswith(_REMOTE_PREFIXES)


def clone_cache_dir(url: str, base: Path) -> Path:
    """Directory a given repository URL is cloned into."""
    return Path(base) / hashlib.md5(url.encode("utf-8")).hexdigest()


async def clone_template(url: str, config: Config) -> Path:
    """Shallow-clone *url* into its cache directory and return that directory.

    Any previous clone of the same URL is removed first, so the template is
    always fresh.

    Raises:
        CloneError: The cache directory could not be prepared, or
            ``git clone`` exited non-zero, timed out, or is not installed.
    """
    target = clone_cache_dir(url, config.clone_dir)
    try:
        if target.exists():
            print_warning(f"Replacing previous clone at {escape(str(target))}")
            shutil.rmtree(target)
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CloneError(url, str(exc)) from exc

    console.print(f"[cyan]Cloning[/cyan] [bold]{escape(url)}[/bold]...")

    returncode, _, stderr = await run_command(
        ["git", "clone", "--depth", "1", url, str(target)],
        timeout=config.clone_timeout,
    )
    if returncode != 0:
        raise CloneError(url, stderr)

    print_success(f"Cloned into {escape(str(target))}")
    return target
