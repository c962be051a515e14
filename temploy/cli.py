"""temploy command-line interface.

Usage::

    temploy generate path/to/template -n my-app -d ~/projects
    temploy generate https://github.com/org/template.git
    temploy deploy ./my-app --image gcr.io/acme/my-app
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from rich.markup import escape

from temploy.config import Config
from temploy.deploy import Deployer, DeployParameters
from temploy.errors import TemployError
from temploy.remote import clone_template, is_remote_template
from temploy.scaffolder import GenerationRequest, ProjectGenerator
from temploy.utils import print_error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="temploy",
        description="Generate projects from templates and deploy them.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  temploy generate ./templates/api -n my-api\n"
            "  temploy generate git@github.com:org/starter.git -d ~/src\n"
            "  temploy deploy ./my-api --service my-api\n"
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a saved JSON config (default: read TEMPLOY_* environment variables)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser(
        "generate", help="Generate a new project from a specified template."
    )
    generate.add_argument("template", help="Template directory or git repository URL")
    generate.add_argument(
        "-n", "--name", default=None, help="Name of the generated project."
    )
    generate.add_argument(
        "-d",
        "--target-directory",
        default=None,
        help="Directory the project is created in (default: current directory).",
    )
    generate.add_argument(
        "-v", "--verbose", action="store_true", help="List every copied entry."
    )

    deploy = subparsers.add_parser("deploy", help="Build and deploy a project.")
    deploy.add_argument("project", help="Path to the project to be deployed")
    deploy.add_argument("--image", default=None, help="Image tag (default: project name)")
    deploy.add_argument("--service", default=None, help="Service name (default: image name)")

    return parser


def _load_config(path: str | None) -> Config:
    if path:
        return Config.load(Path(path))
    return Config.from_env()


def _generate(args: argparse.Namespace, config: Config) -> None:
    if args.verbose:
        config = config.model_copy(update={"verbose": True})

    source_identifier: str | None = None
    template_root = Path(args.template)
    if not template_root.is_dir() and is_remote_template(args.template):
        template_root = asyncio.run(clone_template(args.template, config))
        source_identifier = args.template

    request = GenerationRequest(
        template_root=template_root,
        target_parent=Path(args.target_directory) if args.target_directory else None,
        explicit_name=args.name,
        source_identifier=source_identifier,
    )
    ProjectGenerator(config).generate(request, cwd=Path.cwd())


def _deploy(args: argparse.Namespace, config: Config) -> None:
    params = DeployParameters(
        project_dir=Path(args.project),
        image=args.image,
        service=args.service,
    )
    asyncio.run(Deployer(config).deploy(params))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``temploy`` and ``python -m temploy``.

    Returns:
        ``0`` on success, ``1`` when a temploy error is reported.  Usage
        errors exit with ``2`` from argparse.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args.config)
    except (OSError, ValueError) as exc:
        print_error(f"Error: unable to load config {escape(str(args.config))}: {escape(str(exc))}")
        return 1

    try:
        if args.command == "generate":
            _generate(args, config)
        else:
            _deploy(args, config)
    except TemployError as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1
    return 0
