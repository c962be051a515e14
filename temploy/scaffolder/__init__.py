"""temploy scaffolder -- materializes a template tree into a new project.

Quick usage::

    from pathlib import Path
    from temploy.scaffolder import GenerationRequest, ProjectGenerator

    request = GenerationRequest(template_root=Path("templates/api"), explicit_name="demo")
    summary = ProjectGenerator().generate(request, cwd=Path.cwd())
    print(summary.destination)
"""

from temploy.scaffolder.destination import allocate_destination
from temploy.scaffolder.generator import (
    GenerationRequest,
    GenerationSummary,
    ProjectGenerator,
)
from temploy.scaffolder.materializer import materialize
from temploy.scaffolder.naming import resolve_name
from temploy.scaffolder.walker import EntryKind, TreeEntry, is_excluded, walk_template

__all__ = [
    "EntryKind",
    "GenerationRequest",
    "GenerationSummary",
    "ProjectGenerator",
    "TreeEntry",
    "allocate_destination",
    "is_excluded",
    "materialize",
    "resolve_name",
    "walk_template",
]
