"""Reproduction of template entries under a destination root.

Entries must arrive in walk order (directories before their contents).
File content is copied byte for byte; nothing inside a file is interpreted.
"""

from __future__ import annotations

import shutil
from pathlib import Path, PurePath

from temploy.errors import PrefixStripError, TemplateIOError
from temploy.scaffolder.walker import TreeEntry

_CHUNK_SIZE = 1024 * 1024


def target_path(destination_root: Path, relative_path: PurePath) -> Path:
    """Join *relative_path* onto *destination_root*, refusing path escapes.

    Raises:
        PrefixStripError: The relative path is empty, absolute, or contains
            a ``..`` component.
    """
    rel = PurePath(relative_path)
    if rel == PurePath() or rel.is_absolute() or rel.anchor or ".." in rel.parts:
        raise PrefixStripError(rel, destination_root)
    return Path(destination_root) / rel


def _copy_file(source: Path, target: Path) -> int:
    """Stream *source* into a new file at *target* and return bytes written."""
    try:
        src = open(source, "rb")
    except OSError as exc:
        raise TemplateIOError(source, "read", exc) from exc

    with src:
        try:
            dst = open(target, "xb")
        except OSError as exc:
            raise TemplateIOError(target, "write", exc) from exc

        written = 0
        with dst:
            while True:
                try:
                    chunk = src.read(_CHUNK_SIZE)
                except OSError as exc:
                    raise TemplateIOError(source, "read", exc) from exc
                if not chunk:
                    break
                try:
                    dst.write(chunk)
                except OSError as exc:
                    raise TemplateIOError(target, "write", exc) from exc
                written += len(chunk)
    return written


def materialize(
    entry: TreeEntry,
    destination_root: Path,
    *,
    preserve_permissions: bool = True,
) -> int:
    """Reproduce one template entry under *destination_root*.

    Directories are created with a plain ``mkdir`` (an existing path, e.g. a
    case-insensitive name collision, is an error).  Files are created
    exclusively and filled with the source bytes.

    Args:
        entry: A non-root entry from :func:`~temploy.scaffolder.walker.walk_template`.
        destination_root: The allocated project directory.
        preserve_permissions: Copy the source file's mode bits.

    Returns:
        Number of bytes written (``0`` for directories).

    Raises:
        TemplateIOError: Creating, reading, writing, or chmod-ing failed.
        PrefixStripError: The entry's relative path would leave the root.
    """
    if entry.is_root:
        raise ValueError("the template root entry cannot be materialized")

    target = target_path(destination_root, entry.relative_path)

    if entry.is_dir:
        try:
            target.mkdir()
        except OSError as exc:
            raise TemplateIOError(target, "create", exc) from exc
        return 0

    written = _copy_file(entry.source_path, target)

    if preserve_permissions:
        try:
            shutil.copymode(entry.source_path, target)
        except OSError as exc:
            raise TemplateIOError(target, "chmod", exc) from exc

    return written

