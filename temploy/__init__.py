"""temploy -- generate projects from templates and deploy them.

Key modules:
    scaffolder  - name resolution, destination allocation, tree walk and copy
    remote      - cloning templates from git repositories
    deploy      - container build + cloud deploy with captured logs
    cli         - ``temploy generate`` / ``temploy deploy``
"""

from temploy.config import Config, DeployConfig
from temploy.errors import TemployError
from temploy.scaffolder import GenerationRequest, GenerationSummary, ProjectGenerator

__version__ = "0.1.0"

__all__ = [
    "Config",
    "DeployConfig",
    "GenerationRequest",
    "GenerationSummary",
    "ProjectGenerator",
    "TemployError",
    "__version__",
]
