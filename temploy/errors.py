"""Error taxonomy for temploy.

Every failure surfaced by ``generate`` or ``deploy`` is a subclass of
:class:`TemployError`.  Each subclass keeps the offending path or identifier
as an attribute so callers can report it without parsing the message, and
underlying ``OSError`` causes are chained with ``raise ... from``.
"""

from __future__ import annotations

from pathlib import Path


class TemployError(Exception):
    """Base class for all temploy errors."""


# ---------------------------------------------------------------------------
# Name resolution
# ---------------------------------------------------------------------------


class InvalidTemplatePath(TemployError):
    """Raised when the template path is not an existing directory."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Invalid template path specified: {self.path}")


class InvalidSourceIdentifier(TemployError):
    """Raised when a repository URL has no usable trailing segment."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Invalid repository identifier: {identifier!r}")


class InvalidProjectName(TemployError):
    """Raised when a project name normalises to an empty path segment."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Project name {name!r} produces an empty directory name"
        )


# ---------------------------------------------------------------------------
# Destination allocation
# ---------------------------------------------------------------------------


class DirectoryAlreadyExists(TemployError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(
            f"Failed to create directory {self.path} because it already exists"
        )


class DirectoryCreationFailed(TemployError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Failed to create directory {self.path}")


class CanonicalizationFailed(TemployError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Failed to canonicalize directory name {self.path}")


# ---------------------------------------------------------------------------
# Tree walking and copying
# ---------------------------------------------------------------------------


class EntryReadError(TemployError):
    """Raised when the template walk cannot list or stat an entry.

    ``cause`` holds the underlying ``OSError`` (also available as
    ``__cause__``).  A symlinked directory is reported with a ``cause`` of
    ``None``: the walk never follows directory links.
    """

    def __init__(
        self, path: str | Path, cause: OSError | None = None, reason: str = ""
    ) -> None:
        self.path = Path(path)
        self.cause = cause
        detail = reason or (str(cause) if cause is not None else "unreadable entry")
        super().__init__(f"Failed to read entry {self.path}: {detail}")


class PrefixStripError(TemployError):
    """Raised when an entry cannot be expressed relative to its root."""

    def __init__(self, path: str | Path, root: str | Path | None = None) -> None:
        self.path = Path(path)
        self.root = Path(root) if root is not None else None
        where = f" relative to {self.root}" if self.root is not None else ""
        super().__init__(f"Failed to strip path prefix of {self.path}{where}")


class TemplateIOError(TemployError):
    """Raised when a file or directory cannot be reproduced at the destination.

    Attributes:
        path: The path the failing operation acted on.
        operation: One of ``"create"``, ``"read"``, ``"write"``, ``"chmod"``.
        cause: The underlying ``OSError``.
    """

    def __init__(self, path: str | Path, operation: str, cause: OSError) -> None:
        self.path = Path(path)
        self.operation = operation
        self.cause = cause
        super().__init__(f"Unable to {operation} {self.path}: {cause}")


# ---------------------------------------------------------------------------
# Remote templates and deployment
# ---------------------------------------------------------------------------


class CloneError(TemployError):
    """Raised when ``git clone`` of a remote template fails."""

    def __init__(self, url: str, stderr: str = "") -> None:
        self.url = url
        self.stderr = stderr
        message = f"There was a problem cloning from {url}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


class InvalidDeploymentPath(TemployError):
    def __init__(self, path: str | Path, reason: str = "") -> None:
        self.path = Path(path)
        suffix = f" ({reason})" if reason else ""
        super().__init__(f"Invalid deployment path specified: {self.path}{suffix}")


class DeployError(TemployError):
    """Raised when the build or deploy subprocess exits non-zero."""

    def __init__(self, step: str, returncode: int, log_path: str | Path) -> None:
        self.step = step
        self.returncode = returncode
        self.log_path = Path(log_path)
        super().__init__(
            f"{step} failed (exit {returncode}); see {self.log_path}"
        )
