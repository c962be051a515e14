"""temploy configuration.

Typed settings for template generation, remote cloning and deployment.  All
settings use Pydantic v2 models so they are validated at construction time
and can be serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_SUFFIX = "-clone"
VCS_DIR_NAME = ".git"


class DeployConfig(BaseModel):
    """External tools and log files used by ``temploy deploy``."""

    builder: str = Field(default="docker", description="Container build executable")
    deployer: str = Field(default="gcloud", description="Cloud deploy executable")
    region: str | None = Field(default=None, description="Region passed to the deploy CLI")
    build_log: str = Field(default="build.log")
    deploy_log: str = Field(default="deploy.log")
    timeout: int = Field(default=1800, ge=10, description="Per-step timeout in seconds")


class Config(BaseModel):
    """Global temploy configuration.

    Created once by the CLI entry point (from a JSON file or the environment)
    and passed to :class:`~temploy.scaffolder.ProjectGenerator`,
    :func:`~temploy.remote.clone_template` and :class:`~temploy.deploy.Deployer`.
    """

    default_suffix: str = Field(
        default=DEFAULT_SUFFIX,
        description="Appended to names derived from a template path or repository URL",
    )
    excluded_names: list[str] = Field(
        default_factory=lambda: [VCS_DIR_NAME],
        description="Path components never copied from a template",
    )
    preserve_permissions: bool = Field(default=True)
    verbose: bool = Field(default=False)
    clone_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()) / "temploy")
    clone_timeout: int = Field(default=300, ge=10, description="git clone timeout in seconds")
    deploy: DeployConfig = Field(default_factory=DeployConfig)

    @field_validator("excluded_names")
    @classmethod
    def _no_empty_names(cls, value: list[str]) -> list[str]:
        cleaned = [name.strip() for name in value if name.strip()]
        for name in cleaned:
            if "/" in name or "\\" in name:
                raise ValueError(f"excluded name must be a single path component: {name!r}")
        return cleaned

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.  Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            TEMPLOY_DEFAULT_SUFFIX, TEMPLOY_EXCLUDE, TEMPLOY_VERBOSE,
            TEMPLOY_CLONE_DIR, TEMPLOY_CLONE_TIMEOUT,
            TEMPLOY_BUILDER, TEMPLOY_DEPLOYER, TEMPLOY_DEPLOY_REGION.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("TEMPLOY_DEFAULT_SUFFIX"):
            kwargs["default_suffix"] = os.environ["TEMPLOY_DEFAULT_SUFFIX"]
        if os.environ.get("TEMPLOY_EXCLUDE"):
            kwargs["excluded_names"] = os.environ["TEMPLOY_EXCLUDE"].split(",")
        if os.environ.get("TEMPLOY_VERBOSE"):
            kwargs["verbose"] = os.environ["TEMPLOY_VERBOSE"].lower() in ("1", "true", "yes")
        if os.environ.get("TEMPLOY_CLONE_DIR"):
            kwargs["clone_dir"] = Path(os.environ["TEMPLOY_CLONE_DIR"])
        if os.environ.get("TEMPLOY_CLONE_TIMEOUT"):
            kwargs["clone_timeout"] = int(os.environ["TEMPLOY_CLONE_TIMEOUT"])

        deploy_kwargs: dict[str, Any] = {}
        if os.environ.get("TEMPLOY_BUILDER"):
            deploy_kwargs["builder"] = os.environ["TEMPLOY_BUILDER"]
        if os.environ.get("TEMPLOY_DEPLOYER"):
            deploy_kwargs["deployer"] = os.environ["TEMPLOY_DEPLOYER"]
        if os.environ.get("TEMPLOY_DEPLOY_REGION"):
            deploy_kwargs["region"] = os.environ["TEMPLOY_DEPLOY_REGION"]

        return cls(deploy=DeployConfig(**deploy_kwargs), **kwargs)
