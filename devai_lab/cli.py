"""CLI entry point for devai-lab, built on cli-core-yo.

Provides ``generate``, ``select-cuda``, and ``push-image`` commands for
the DevAI Lab container environment.

Usage::

    devai-lab --help
    devai-lab generate all dev
    devai-lab generate terraform prod --project-root ~/src/devai-lab
    devai-lab select-cuda --list --ubuntu 22.04
    devai-lab push-image aws --gpu
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from cli_core_yo import output
from cli_core_yo.app import create_app
from cli_core_yo.runtime import _reset, initialize
from cli_core_yo.spec import CliSpec, XdgSpec

from devai_lab.config.models import DEFAULT_PROFILE, DEFAULT_TARGET

# ── App specification ────────────────────────────────────────────────────────

spec = CliSpec(
    prog_name="devai-lab",
    app_display_name="DevAI Lab",
    dist_name="devai-lab",
    root_help=(
        "Generate deployment configuration, pick CUDA base images and "
        "push images for the DevAI Lab environment."
    ),
    xdg=XdgSpec(app_dir_name="devai-lab"),
)

app = create_app(spec)


# ── Root callback (global options) ───────────────────────────────────────────


@app.callback()
def _root_callback(
    json_flag: bool = typer.Option(
        False, "--json", "-j", help="Output as JSON."
    ),
) -> None:
    """DevAI Lab control plane."""
    _reset()
    debug = os.environ.get("CLI_CORE_YO_DEBUG") == "1"
    xdg_paths = app._cli_core_yo_xdg_paths  # type: ignore[attr-defined]
    initialize(spec, xdg_paths, json_mode=json_flag, debug=debug)


# ── generate command ─────────────────────────────────────────────────────────


@app.command()
def generate(
    target: str = typer.Argument(
        DEFAULT_TARGET,
        help="compose, terraform, kubernetes, or all.",
    ),
    profile: str = typer.Argument(
        DEFAULT_PROFILE,
        help="Profile overlay under config/profiles/ (dev, staging, prod).",
    ),
    project_root: Optional[str] = typer.Option(
        None,
        "--project-root",
        help="Repository root. Defaults to DEVAI_PROJECT_ROOT or the cwd.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output.",
    ),
) -> None:
    """Generate .env, terraform.tfvars and ConfigMap files from config/.

    Exit codes: 0 = success, 1 = unknown target, 2 = write failure,
    4 = PyYAML missing.
    """
    from devai_lab.workflow.generate_config import run_generate

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    rc = run_generate(
        target or DEFAULT_TARGET,
        profile or DEFAULT_PROFILE,
        project_root=project_root,
        debug=debug,
    )
    raise typer.Exit(rc)


# ── select-cuda command ──────────────────────────────────────────────────────


@app.command("select-cuda")
def select_cuda(
    ubuntu: str = typer.Option(
        "24.04",
        "--ubuntu",
        help="Ubuntu version of the base image.",
    ),
    list_only: bool = typer.Option(
        False,
        "--list",
        help="List available images without selecting one.",
    ),
    auto: bool = typer.Option(
        False,
        "--auto",
        help="Apply the recommended image without prompting.",
    ),
    dockerfile: str = typer.Option(
        "Dockerfile.gpu",
        "--dockerfile",
        help="Dockerfile whose nvidia/cuda FROM line is updated.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output.",
    ),
) -> None:
    """Pick an NVIDIA CUDA+cuDNN runtime base image for the GPU build."""
    from devai_lab import ui
    from devai_lab.images.cuda import (
        ImageLookupError,
        fetch_cuda_tags,
        group_by_version,
        parse_selection,
        recommend,
        update_dockerfile,
    )

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    output.action(f"Fetching CUDA+cuDNN images for Ubuntu {ubuntu} ...")
    try:
        releases = group_by_version(fetch_cuda_tags(ubuntu))
        recommended = recommend(releases)
    except ImageLookupError as exc:
        output.error(str(exc))
        raise typer.Exit(1) from exc

    rows = [
        [str(i), r.branch, r.version, r.image] for i, r in enumerate(releases, 1)
    ]
    ui.table(
        f"Available CUDA+cuDNN Runtime Images (Ubuntu {ubuntu})",
        ["#", "Branch", "Version", "Full Image Tag"],
        rows,
        highlight_row=releases.index(recommended),
    )
    ui.warn(
        "The newest CUDA major is usually too fresh for PyTorch/ChromaDB; "
        "the latest release of the previous major is recommended."
    )

    if list_only:
        ui.ok(f"Recommended: {recommended.image}")
        raise typer.Exit(0)

    selected = recommended
    if not auto:
        while True:
            raw = typer.prompt(
                f"Enter selection (1-{len(releases)}) or 'q' to quit "
                "[recommended: press Enter]",
                default="",
                show_default=False,
            )
            try:
                choice = parse_selection(raw, releases, recommended)
            except ValueError as exc:
                ui.fail(str(exc))
                continue
            if choice is None:
                ui.info("Selection cancelled.")
                raise typer.Exit(0)
            selected = choice
            break

    ui.ok(f"Selected: {selected.image}")
    path = Path(dockerfile)
    if not path.is_file():
        ui.warn(f"Dockerfile not found: {dockerfile}")
        ui.info(f"To use this image, add to your Dockerfile: FROM {selected.image}")
        raise typer.Exit(0)

    try:
        old_line, new_line = update_dockerfile(path, selected.tag)
    except ImageLookupError as exc:
        output.error(str(exc))
        raise typer.Exit(1) from exc
    ui.detail("Current", old_line)
    ui.detail("New", new_line)
    output.success(f"Updated {dockerfile} with {selected.image}")
    raise typer.Exit(0)


# ── push-image command ───────────────────────────────────────────────────────


@app.command("push-image")
def push_image_cmd(
    cloud: str = typer.Argument(
        ...,
        help="aws (ECR), azure (ACR), or gcp (Artifact Registry).",
    ),
    gpu: bool = typer.Option(
        False,
        "--gpu",
        help="Build and push the GPU image.",
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help="AWS CLI profile for ECR login. Defaults to AWS_PROFILE env var.",
    ),
    project_root: Optional[str] = typer.Option(
        None,
        "--project-root",
        help="Repository root. Defaults to DEVAI_PROJECT_ROOT or the cwd.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output.",
    ),
) -> None:
    """Build the image and push it to a cloud registry.

    Environment variables:
      IMAGE_TAG      Image tag (default: latest)
      PROJECT_NAME   Project name (default: devai-lab)
    """
    from devai_lab.registry.push import PushError, PushOptions, push_image
    from devai_lab.workflow.generate_config import resolve_project_root

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    options = PushOptions.from_env(
        resolve_project_root(project_root), gpu=gpu, aws_profile=profile
    )
    output.action(f"Pushing {options.local_ref} to {cloud} ...")
    try:
        remote = push_image(cloud, options)
    except ValueError as exc:
        output.error(str(exc))
        raise typer.Exit(1) from exc
    except PushError as exc:
        output.error(str(exc))
        raise typer.Exit(2) from exc

    output.success(f"Pushed to: {remote}")
    raise typer.Exit(0)


# ── Entry point ──────────────────────────────────────────────────────────────


def main() -> int:
    """Run the CLI and return an exit code."""
    try:
        app()
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
