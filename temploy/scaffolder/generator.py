"""Main generation orchestrator.

Takes a ``GenerationRequest`` and reproduces the template tree in a fresh
project directory:

    resolve name -> allocate destination -> walk template -> materialize

Every step raises a :class:`~temploy.errors.TemployError` subclass, which is
propagated unchanged.  Nothing is retried and nothing is rolled back: if a
copy fails halfway, the partially populated directory stays on disk for
inspection.
"""

from __future__ import annotations

from pathlib import Path, PurePath

from pydantic import BaseModel, ConfigDict, Field
from rich.markup import escape
from rich.panel import Panel

from temploy.config import Config
from temploy.errors import InvalidTemplatePath
from temploy.utils import console, format_bytes

from .destination import allocate_destination
from .materializer import materialize
from .naming import resolve_name
from .walker import walk_template


# ---------------------------------------------------------------------------
# Request / result models
# ---------------------------------------------------------------------------


class GenerationRequest(BaseModel):
    """Everything needed for one ``generate`` call.

    ``None`` means "not given" for every optional field.  The source
    identifier is only used to derive a name; cloning happens before the
    request is built.
    """

    model_config = ConfigDict(frozen=True)

    template_root: Path = Field(..., description="Local template directory")
    target_parent: Path | None = Field(
        default=None, description="Directory the project is created in (default: cwd)"
    )
    explicit_name: str | None = Field(default=None, description="User-supplied project name")
    source_identifier: str | None = Field(
        default=None, description="Repository URL the template was cloned from"
    )


class GenerationSummary(BaseModel):
    """Outcome of a successful ``generate`` call."""

    project_name: str
    destination: Path
    directories_created: int = 0
    files_copied: int = 0
    bytes_copied: int = 0


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Generates a project directory from a template directory.

    The working directory used when a request has no ``target_parent`` is
    passed to :meth:`generate` explicitly rather than read from the process.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def generate(self, request: GenerationRequest, cwd: Path) -> GenerationSummary:
        """Generate a new project from ``request.template_root``.

        Args:
            request: Template location and naming inputs.
            cwd: Parent directory used when ``request.target_parent`` is
                ``None``.

        Returns:
            A summary naming the project and its canonical directory.
        """
        project_name = resolve_name(
            request.explicit_name,
            request.source_identifier,
            request.template_root,
            suffix=self.config.default_suffix,
        )

        # checked before anything is created, whichever way the name was found
        if not request.template_root.is_dir():
            raise InvalidTemplatePath(request.template_root)

        parent = request.target_parent if request.target_parent is not None else cwd
        destination = allocate_destination(parent, project_name)

        console.print(f"[cyan]Generating project[/cyan] [bold]{escape(project_name)}[/bold]...")

        summary = GenerationSummary(project_name=project_name, destination=destination)
        entries = walk_template(
            request.template_root,
            self.config.excluded_names,
            skip=_nested_destination(request.template_root, destination),
        )
        for entry in entries:
            written = materialize(
                entry,
                destination,
                preserve_permissions=self.config.preserve_permissions,
            )
            if entry.is_dir:
                summary.directories_created += 1
            else:
                summary.files_copied += 1
                summary.bytes_copied += written
            if self.config.verbose:
                console.print(f"  [dim]{escape(str(entry.relative_path))}[/dim]")

        console.print(
            Panel(
                f"[green]Project {escape(project_name)} has been successfully generated![/green]\n"
                f"  Path:        {escape(str(destination))}\n"
                f"  Directories: {summary.directories_created}\n"
                f"  Files:       {summary.files_copied} "
                f"({format_bytes(summary.bytes_copied)})",
                title="Project Ready",
                border_style="green",
            )
        )
        return summary


def _nested_destination(template_root: Path, destination: Path) -> list[PurePath]:
    """Return the destination relative to the template when it lies inside it."""
    try:
        return [PurePath(destination.relative_to(template_root.resolve()))]
    except (OSError, ValueError):
        return []
