"""Project deployment.

Builds a container image from the ``Dockerfile`` at the root of a project
and hands it to a cloud deploy CLI.  Both tools run as subprocesses; their
stdout/stderr are written to plain-text log files inside the project
(``build.log`` and ``deploy.log`` by default).
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field
from rich.markup import escape
from rich.panel import Panel

from temploy.config import Config
from temploy.errors import DeployError, InvalidDeploymentPath
from temploy.utils import console, run_command, to_kebab_case


class DeployParameters(BaseModel):
    """What to deploy and under which names."""

    project_dir: Path = Field(..., description="Project to deploy")
    image: str | None = Field(default=None, description="Image tag (default: project name)")
    service: str | None = Field(default=None, description="Service name (default: image)")

    @property
    def image_tag(self) -> str:
        return self.image or to_kebab_case(self.project_dir.resolve().name)

    @property
    def service_name(self) -> str:
        return self.service or self.image_tag.split(":", 1)[0].rsplit("/", 1)[-1]


@dataclass
class DeployResult:
    """Outcome of a successful deployment."""

    image: str
    service: str
    build_log: Path
    deploy_log: Path


def write_log(path: Path, cmd: list[str], returncode: int, stdout: str, stderr: str) -> Path:
    """Write a subprocess transcript to *path*."""
    lines = [
        f"$ {shlex.join(cmd)}",
        f"exit code: {returncode}",
        "",
        "--- stdout ---",
        stdout,
        "",
        "--- stderr ---",
        stderr,
        "",
    ]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


class Deployer:
    """Runs the container build and the cloud deploy for a project."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def build_command(self, params: DeployParameters) -> list[str]:
        return [
            self.config.deploy.builder,
            "build",
            "-t",
            params.image_tag,
            str(params.project_dir),
        ]

    def deploy_command(self, params: DeployParameters) -> list[str]:
        cmd = [
            self.config.deploy.deployer,
            "run",
            "deploy",
            params.service_name,
            "--image",
            params.image_tag,
            "--quiet",
        ]
        if self.config.deploy.region:
            cmd.extend(["--region", self.config.deploy.region])
        return cmd

    async def _run_step(self, step: str, cmd: list[str], log_path: Path) -> None:
        returncode, stdout, stderr = await run_command(
            cmd, timeout=self.config.deploy.timeout
        )
        write_log(log_path, cmd, returncode, stdout, stderr)
        if returncode != 0:
            raise DeployError(step, returncode, log_path)

    async def deploy(self, params: DeployParameters) -> DeployResult:
        """Build and deploy *params.project_dir*.

        Raises:
            InvalidDeploymentPath: The directory is missing or has no
                ``Dockerfile``.
            DeployError: The build or deploy command exited non-zero.  The
                log file named in the error holds the full output.
        """
        project_dir = params.project_dir
        if not project_dir.is_dir():
            raise InvalidDeploymentPath(project_dir, "not a directory")
        if not (project_dir / "Dockerfile").is_file():
            raise InvalidDeploymentPath(project_dir, "no Dockerfile at the project root")

        build_log = project_dir / self.config.deploy.build_log
        deploy_log = project_dir / self.config.deploy.deploy_log

        console.print("[cyan]Building container image; this might take a few minutes...[/cyan]")
        await self._run_step("Container build", self.build_command(params), build_log)

        console.print(
            f"[cyan]Deploying[/cyan] [bold]{escape(params.service_name)}[/bold]..."
        )
        await self._run_step("Deploy", self.deploy_command(params), deploy_log)

        console.print(
            Panel(
                f"[green]Deployed {escape(params.service_name)}[/green]\n"
                f"  Image:      {escape(params.image_tag)}\n"
                f"  Build log:  {escape(str(build_log))}\n"
                f"  Deploy log: {escape(str(deploy_log))}",
                title="Deployment Complete",
                border_style="green",
            )
        )
        return DeployResult(
            image=params.image_tag,
            service=params.service_name,
            build_log=build_log,
            deploy_log=deploy_log,
        )
