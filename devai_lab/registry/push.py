"""Push the DevAI Lab image to a cloud container registry.

Wraps ``docker``, ``terraform``, ``az`` and ``gcloud`` as subprocesses,
mirroring ``scripts/push-image.sh``.  Registry coordinates come from the
``terraform output`` of the matching ``deploy/terraform/<cloud>`` stack;
ECR credentials are fetched with boto3 instead of ``aws ecr
get-login-password``.
"""

from __future__ import annotations

import base64
import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel

logger = logging.getLogger(__name__)

SUPPORTED_CLOUDS = ("aws", "azure", "gcp")
DEFAULT_IMAGE_TAG = "latest"
DEFAULT_PROJECT_NAME = "devai-lab"
GPU_DOCKERFILE = "Dockerfile.gpu"


class PushError(RuntimeError):
    """Raised when a build, login, tag or push step fails."""


class PushOptions(BaseModel):
    """Inputs for one push run."""

    project_root: Path
    project_name: str = DEFAULT_PROJECT_NAME
    image_tag: str = DEFAULT_IMAGE_TAG
    gpu: bool = False
    aws_profile: Optional[str] = None

    @classmethod
    def from_env(
        cls, project_root: Path, *, gpu: bool = False, aws_profile: Optional[str] = None
    ) -> "PushOptions":
        """Read ``IMAGE_TAG`` / ``PROJECT_NAME`` from the environment."""
        return cls(
            project_root=project_root,
            project_name=os.environ.get("PROJECT_NAME") or DEFAULT_PROJECT_NAME,
            image_tag=os.environ.get("IMAGE_TAG") or DEFAULT_IMAGE_TAG,
            gpu=gpu,
            aws_profile=aws_profile or os.environ.get("AWS_PROFILE") or None,
        )

    @property
    def image_name(self) -> str:
        return f"{self.project_name}-gpu" if self.gpu else self.project_name

    @property
    def local_ref(self) -> str:
        return f"{self.image_name}:{self.image_tag}"


# ---------------------------------------------------------------------------
# Subprocess helpers
# ---------------------------------------------------------------------------


def _run(
    cmd: List[str],
    *,
    cwd: Optional[Path] = None,
    input_text: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """Run *cmd*, raising :class:`PushError` on a missing tool or non-zero exit."""
    logger.info("Running: %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            input=input_text,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise PushError(f"{cmd[0]} not found on PATH") from exc
    if proc.returncode != 0:
        raise PushError(
            f"{' '.join(cmd[:2])} failed (rc={proc.returncode}): "
            f"{proc.stderr.strip()}"
        )
    return proc


def terraform_output(project_root: Path, cloud: str, name: str) -> str:
    """Return ``terraform output -raw <name>`` for *cloud*, or ``""``."""
    tf_dir = project_root / "deploy" / "terraform" / cloud
    try:
        proc = subprocess.run(
            ["terraform", "output", "-raw", name],
            cwd=str(tf_dir),
            capture_output=True,
            text=True,
        )
    except (FileNotFoundError, NotADirectoryError):
        logger.debug("terraform output %s unavailable for %s", name, cloud)
        return ""
    if proc.returncode != 0:
        return ""
    return proc.stdout.strip()


def _require_output(options: PushOptions, cloud: str, name: str, label: str) -> str:
    value = terraform_output(options.project_root, cloud, name)
    if not value:
        raise PushError(f"{label} not found. Run 'make tf-apply-{cloud}' first.")
    return value


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def build_image(options: PushOptions) -> str:
    """Build the local image and return its ``name:tag`` reference."""
    cmd = ["docker", "build"]
    if options.gpu:
        cmd += ["-f", GPU_DOCKERFILE]
    cmd += ["-t", options.local_ref, "."]
    _run(cmd, cwd=options.project_root)
    return options.local_ref


def _tag_and_push(options: PushOptions, remote_ref: str) -> str:
    _run(["docker", "tag", options.local_ref, remote_ref])
    _run(["docker", "push", remote_ref])
    return remote_ref


def ecr_region(ecr_url: str) -> str:
    """``<acct>.dkr.ecr.<region>.amazonaws.com/<repo>`` → ``<region>``."""
    parts = ecr_url.split(".")
    if len(parts) < 4:
        raise PushError(f"Unrecognised ECR repository URL: {ecr_url}")
    return parts[3]


def artifact_registry_region(ar_url: str) -> str:
    """``us-central1-docker.pkg.dev/...`` → ``us-central1``."""
    return "-".join(ar_url.split("-")[:2])


def ecr_login_password(region: str, *, profile: Optional[str] = None) -> str:
    """Return the ECR registry password via ``GetAuthorizationToken``."""
    try:
        session = boto3.Session(profile_name=profile, region_name=region)
        resp = session.client("ecr").get_authorization_token()
        token = resp["authorizationData"][0]["authorizationToken"]
    except (BotoCoreError, ClientError, KeyError, IndexError) as exc:
        raise PushError(f"Could not obtain ECR credentials: {exc}") from exc
    _, _, password = base64.b64decode(token).decode("utf-8").partition(":")
    return password


def push_aws(options: PushOptions) -> str:
    ecr_url = _require_output(options, "aws", "ecr_repository_url", "ECR URL")
    region = ecr_region(ecr_url)
    password = ecr_login_password(region, profile=options.aws_profile)
    _run(
        ["docker", "login", "--username", "AWS", "--password-stdin", ecr_url],
        input_text=password,
    )
    return _tag_and_push(options, f"{ecr_url}:{options.image_tag}")


def push_azure(options: PushOptions) -> str:
    acr_name = _require_output(options, "azure", "acr_name", "ACR name")
    acr_server = terraform_output(options.project_root, "azure", "acr_login_server")
    _run(["az", "acr", "login", "--name", acr_name])
    return _tag_and_push(options, f"{acr_server}/{options.local_ref}")


def push_gcp(options: PushOptions) -> str:
    ar_url = _require_output(
        options, "gcp", "artifact_registry_url", "Artifact Registry URL"
    )
    region = artifact_registry_region(ar_url)
    _run(["gcloud", "auth", "configure-docker", f"{region}-docker.pkg.dev", "--quiet"])
    return _tag_and_push(options, f"{ar_url}/{options.local_ref}")


_PUSHERS = {
    "aws": push_aws,
    "azure": push_azure,
    "gcp": push_gcp,
}


def push_image(cloud: str, options: PushOptions) -> str:
    """Build the image and push it to *cloud*'s registry.

    Returns the pushed remote reference.

    Raises
    ------
    ValueError
        *cloud* is not one of :data:`SUPPORTED_CLOUDS`.
    PushError
        Any external step failed.
    """
    pusher = _PUSHERS.get(cloud)
    if pusher is None:
        raise ValueError(
            f"Unknown cloud: {cloud} (expected one of: {', '.join(SUPPORTED_CLOUDS)})"
        )
    build_image(options)
    remote = pusher(options)
    logger.info("Pushed to: %s", remote)
    return remote
