"""Template tree traversal.

Walking a template happens in two stages:

* :func:`enumerate_tree` lists every entry under the template root, lazily and
  depth-first, always yielding a directory before anything inside it.
* :func:`walk_template` filters that sequence with the pure
  :func:`is_excluded` predicate and drops the synthetic root entry.

Directory symlinks are never followed; file symlinks are copied as the
file they point to.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath

from temploy.config import VCS_DIR_NAME
from temploy.errors import EntryReadError, PrefixStripError


class EntryKind(str, Enum):
    """Kind of a template tree entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class TreeEntry:
    """One file or directory found under a template root."""

    relative_path: PurePath
    kind: EntryKind
    source_path: Path

    @property
    def is_root(self) -> bool:
        return self.relative_path == PurePath()

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def is_excluded(
    relative_path: PurePath, excluded_names: Iterable[str] = (VCS_DIR_NAME,)
) -> bool:
    """Return ``True`` if any component of *relative_path* is an excluded name.

    Matching is exact: ``.git`` excludes ``.git/config`` and
    ``sub/.git/HEAD`` but not ``.github/`` or ``.gitignore``.
    """
    names = set(excluded_names)
    return any(part in names for part in PurePath(relative_path).parts)


# ---------------------------------------------------------------------------
# Enumeration
# ---------------------------------------------------------------------------


def _file_entry(full: Path, relative: PurePath) -> TreeEntry:
    try:
        st = os.stat(full)
    except OSError as exc:
        raise EntryReadError(full, exc) from exc
    if not stat.S_ISREG(st.st_mode):
        raise EntryReadError(full, reason="not a regular file")
    return TreeEntry(relative, EntryKind.FILE, full)


def _relative(path: str | Path, root: Path) -> PurePath:
    try:
        return PurePath(Path(path).relative_to(root))
    except ValueError as exc:
        raise PrefixStripError(path, root) from exc


def _list_dir(path: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda child: child.name)
    except OSError as exc:
        raise EntryReadError(path, exc) from exc


def _walk_dir(
    path: Path,
    root: Path,
    prune: Callable[[PurePath], bool] | None,
) -> Iterator[TreeEntry]:
    for child in _list_dir(path):
        full = Path(child.path)
        relative = _relative(full, root)
        try:
            is_dir = child.is_dir(follow_symlinks=False)
            is_link = child.is_symlink()
        except OSError as exc:
            raise EntryReadError(full, exc) from exc

        if prune is not None and prune(relative):
            # e.g. ``.git``: yielded for the filter stage, never listed or stat-ed
            kind = EntryKind.DIRECTORY if is_dir else EntryKind.FILE
            yield TreeEntry(relative, kind, full)
            continue

        if is_dir:
            yield TreeEntry(relative, EntryKind.DIRECTORY, full)
            yield from _walk_dir(full, root, prune)
        elif is_link and os.path.isdir(full):
            raise EntryReadError(full, reason="refusing to follow symlinked directory")
        else:
            yield _file_entry(full, relative)


def enumerate_tree(
    root: str | Path,
    prune: Callable[[PurePath], bool] | None = None,
) -> Iterator[TreeEntry]:
    """Yield every entry under *root*, the root itself first.

    Entries are produced depth-first (pre-order) with names sorted, so an
    unchanged tree always gives the same sequence and a directory is always
    yielded before any of its children.  Each directory listing is read and
    closed before its children are visited.  When *prune* returns ``True``
    for an entry's relative path the entry is still yielded but never
    listed or stat-ed.

    Raises:
        EntryReadError: A directory could not be listed, a file could not be
            stat-ed (dangling symlink, removed mid-walk), an entry is not a
            regular file, or a directory is a symlink.
        PrefixStripError: An entry is not under *root*.
    """
    root_path = Path(root)
    yield TreeEntry(PurePath(), EntryKind.DIRECTORY, root_path)
    yield from _walk_dir(root_path, root_path, prune)


def walk_template(
    root: str | Path,
    excluded_names: Iterable[str] = (VCS_DIR_NAME,),
    skip: Iterable[PurePath] = (),
) -> Iterator[TreeEntry]:
    """Yield the entries of a template that should be copied.

    The root entry and every entry with an excluded path component are
    dropped; excluded directories are not even listed.  *skip* names
    relative subtrees to drop the same way (the destination, when it lies
    inside the template).  Each call starts a fresh walk.
    """
    names = tuple(excluded_names)
    skipped = tuple(PurePath(p) for p in skip)

    def excluded(relative: PurePath) -> bool:
        if any(relative == s or s in relative.parents for s in skipped):
            return True
        return is_excluded(relative, names)

    for entry in enumerate_tree(root, prune=excluded):
        if entry.is_root or excluded(entry.relative_path):
            continue
        yield entry
