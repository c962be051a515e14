"""Destination directory allocation.

A generated project always lands in a directory that did not exist before
the run.  An existing path is a hard stop: temploy never merges into user
data.
"""

from __future__ import annotations

import os
from pathlib import Path

from temploy.errors import (
    CanonicalizationFailed,
    DirectoryAlreadyExists,
    DirectoryCreationFailed,
    InvalidProjectName,
)
from temploy.utils import to_kebab_case


def destination_for(target_parent: str | Path, raw_name: str) -> Path:
    """Return the (not yet created) destination path for *raw_name*.

    Raises:
        InvalidProjectName: If the name normalises to an empty segment.
    """
    segment = to_kebab_case(raw_name)
    if not segment:
        raise InvalidProjectName(raw_name)
    return Path(target_parent) / segment


def allocate_destination(target_parent: str | Path, raw_name: str) -> Path:
    """Create the project directory and return its canonical path.

    Missing ancestors of *target_parent* are created too.  If creation
    itself fails, ancestors created on the way are not removed.

    Raises:
        InvalidProjectName: The name normalises to nothing.
        DirectoryAlreadyExists: Anything (even a dangling symlink) is
            already at the destination.
        DirectoryCreationFailed: ``mkdir`` failed for any other reason.
        CanonicalizationFailed: The created path could not be resolved.
    """
    dir_path = destination_for(target_parent, raw_name)

    if os.path.lexists(dir_path):
        raise DirectoryAlreadyExists(dir_path)

    try:
        dir_path.mkdir(parents=True, exist_ok=False)
    except FileExistsError as exc:
        # Either another process created the leaf first, or an ancestor is a file.
        if os.path.lexists(dir_path):
            raise DirectoryAlreadyExists(dir_path) from exc
        raise DirectoryCreationFailed(dir_path) from exc
    except OSError as exc:
        raise DirectoryCreationFailed(dir_path) from exc

    try:
        return dir_path.resolve(strict=True)
    except OSError as exc:
        raise CanonicalizationFailed(dir_path) from exc
