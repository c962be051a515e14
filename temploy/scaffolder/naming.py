"""Project name resolution.

The name of a generated project comes from, in order of precedence:

1. an explicit name given by the user,
2. the repository URL a remote template was cloned from,
3. the template directory itself.

Names derived from (2) and (3) get a suffix marker (``-clone`` by default)
so a generated project never shadows the template it came from.
"""

from __future__ import annotations

import os
from pathlib import Path

from temploy.config import DEFAULT_SUFFIX
from temploy.errors import InvalidSourceIdentifier, InvalidTemplatePath


def name_from_source_identifier(identifier: str, suffix: str = DEFAULT_SUFFIX) -> str:
    """Derive a project name from a repository URL.

    The last ``/``-separated segment is taken and cut at its first ``.``,
    which drops ``.git`` and archive extensions::

        name_from_source_identifier("git@host:org/my-proj.git") -> "my-proj-clone"
        name_from_source_identifier("https://host/org/tool.tar.gz") -> "tool-clone"

    Raises:
        InvalidSourceIdentifier: If nothing is left after trimming.
    """
    tail = identifier.strip().rsplit("/", 1)[-1]
    stem = tail.split(".", 1)[0]
    if not stem:
        raise InvalidSourceIdentifier(identifier)
    return f"{stem}{suffix}"


def name_from_template_path(template_root: str | Path, suffix: str = DEFAULT_SUFFIX) -> str:
    """Derive a project name from the template directory's final segment.

    Raises:
        InvalidTemplatePath: If *template_root* is not an existing directory
            or has no final segment (a filesystem root).
    """
    path = Path(template_root)
    if not path.is_dir():
        raise InvalidTemplatePath(path)
    # abspath normalises "." and ".." without following symlinks
    base = Path(os.path.abspath(path)).name
    if not base:
        raise InvalidTemplatePath(path)
    return f"{base}{suffix}"


def resolve_name(
    explicit_name: str | None,
    source_identifier: str | None,
    template_root: str | Path,
    suffix: str = DEFAULT_SUFFIX,
) -> str:
    """Resolve the raw project name for a generation run.

    An explicit name is returned verbatim; normalisation into a directory
    name happens when the destination is allocated.  The function is pure:
    the same inputs always give the same name.
    """
    if explicit_name is not None:
        return explicit_name
    if source_identifier is not None:
        return name_from_source_identifier(source_identifier, suffix)
    return name_from_template_path(template_root, suffix)
