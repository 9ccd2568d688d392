"""Configuration generator workflow.

Implements ``generate(target, profile)``:

1. **Toolchain** — PyYAML must be importable, otherwise nothing is written.
2. **Resolve** — for each artifact kind of the target, resolve every
   ``(key path, default)`` pair: profile overlay → common → default.
3. **Render + write** — fill the fixed template and truncate-write it to
   the kind's fixed path.

Each write is independent: if the second artifact fails, the first one
stays on disk.
"""

from __future__ import annotations

import importlib.util
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from devai_lab.config.models import (
    DEFAULT_CONTAINER_USER,
    DEFAULT_PROFILE,
    KNOWN_CLOUDS,
    ArtifactKind,
    GeneratedArtifact,
    GeneratorSettings,
    Target,
    UnknownTargetError,
)
from devai_lab.render.artifacts import ARTIFACT_FIELDS, render_artifact
from devai_lab.render.renderer import write_rendered

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_WRITE_FAILURE = 2
EXIT_TOOLCHAIN = 4

#: Environment variable overriding the project root.
PROJECT_ROOT_ENV = "DEVAI_PROJECT_ROOT"


class YamlSupportError(RuntimeError):
    """Raised when the YAML processing library is not installed."""


# ---------------------------------------------------------------------------
# Toolchain / settings
# ---------------------------------------------------------------------------

def ensure_yaml_support() -> None:
    """Fail fast if PyYAML cannot be imported."""
    if importlib.util.find_spec("yaml") is None:
        raise YamlSupportError(
            "PyYAML is required but not installed. "
            "Install with: pip install pyyaml"
        )


def discover_clouds(
    deploy_dir: str | Path, known: Iterable[str] = KNOWN_CLOUDS
) -> List[str]:
    """Return the known clouds that have a ``deploy/terraform/<cloud>`` dir."""
    tf_root = Path(deploy_dir) / "terraform"
    return [cloud for cloud in known if (tf_root / cloud).is_dir()]


def resolve_project_root(project_root: Optional[str | Path] = None) -> Path:
    """Return the project root.

    Precedence: explicit *project_root* → ``DEVAI_PROJECT_ROOT`` → cwd.
    """
    if project_root:
        return Path(project_root).resolve()
    env_root = os.environ.get(PROJECT_ROOT_ENV, "")
    if env_root:
        return Path(env_root).resolve()
    return Path.cwd()


def build_settings(
    project_root: Optional[str | Path] = None,
    *,
    clouds: Optional[List[str]] = None,
) -> GeneratorSettings:
    """Build the :class:`GeneratorSettings` for this process.

    When *clouds* is ``None`` the enabled clouds are discovered once from
    the terraform deployment root.
    """
    root = resolve_project_root(project_root)
    if clouds is None:
        clouds = discover_clouds(root / "deploy")
    return GeneratorSettings(
        project_root=root,
        clouds=list(clouds),
        user_id=os.getuid(),
        group_id=os.getgid(),
        container_user=DEFAULT_CONTAINER_USER,
    )


def generation_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 timestamp with seconds precision and UTC offset."""
    if now is None:
        now = datetime.now().astimezone()
    return now.isoformat(timespec="seconds")


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def generate(
    target: str | Target,
    profile: str,
    settings: GeneratorSettings,
    *,
    now: Optional[datetime] = None,
) -> List[GeneratedArtifact]:
    """Write every artifact *target* asks for and return what was written.

    An empty *profile* means :data:`DEFAULT_PROFILE`.

    Raises
    ------
    YamlSupportError
        PyYAML is missing; no file is written.
    UnknownTargetError
        *target* is not one of :class:`Target`.
    OSError
        A destination could not be written (earlier writes are kept).
    """
    ensure_yaml_support()
    from devai_lab.config.sources import load_sources, resolve_fields

    if not isinstance(target, Target):
        target = Target.parse(target)
    profile = profile or DEFAULT_PROFILE

    logger.info(
        "Generating configuration for target: %s, profile: %s",
        target.value, profile,
    )
    sources = load_sources(settings.config_dir, profile)
    timestamp = generation_timestamp(now)

    written: List[GeneratedArtifact] = []
    for kind in target.kinds:
        values = resolve_fields(sources, ARTIFACT_FIELDS[kind])
        text = render_artifact(
            kind,
            values,
            profile=profile,
            timestamp=timestamp,
            user_id=settings.user_id,
            group_id=settings.group_id,
            container_user=settings.container_user,
        )
        if kind is ArtifactKind.TERRAFORM:
            for cloud in settings.clouds:
                path = write_rendered(settings.artifact_path(kind, cloud), text)
                written.append(GeneratedArtifact(kind=kind, path=path, cloud=cloud))
        else:
            path = write_rendered(settings.artifact_path(kind), text)
            written.append(GeneratedArtifact(kind=kind, path=path))
    return written


def run_generate(
    target: str,
    profile: str,
    *,
    project_root: Optional[str | Path] = None,
    debug: bool = False,
) -> int:
    """CLI-facing wrapper: print progress and map failures to exit codes."""
    from devai_lab import ui

    if debug:
        logging.getLogger("devai_lab").setLevel(logging.DEBUG)

    settings = build_settings(project_root)
    ui.phase("GENERATE")
    ui.detail("target", target)
    ui.detail("profile", profile)

    try:
        artifacts = generate(target, profile, settings)
    except YamlSupportError as exc:
        ui.error_msg(str(exc))
        return EXIT_TOOLCHAIN
    except UnknownTargetError as exc:
        ui.error_msg(str(exc))
        ui.info("Usage: generate-config {compose|terraform|kubernetes|all} {dev|staging|prod}")
        return EXIT_USAGE
    except OSError as exc:
        ui.error_msg(f"Failed to write artifact: {exc}")
        return EXIT_WRITE_FAILURE

    for artifact in artifacts:
        ui.ok(f"Generated: {artifact.path}")
    if target in (Target.TERRAFORM.value, Target.ALL.value) and not settings.clouds:
        ui.warn("No terraform cloud directories found; no tfvars written.")
    ui.ok("Configuration generation complete!")
    return EXIT_SUCCESS
