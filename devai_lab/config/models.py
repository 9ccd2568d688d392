"""Pydantic models for the DevAI Lab configuration generator.

Defines the data structures for:
- Targets and the artifact kinds each one produces
- Field specifications (key path + literal default) used by every artifact
- Loaded source documents (common + profile overlay)
- The generator settings built once at process start
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class UnknownTargetError(ValueError):
    """Raised when a generation target is not one of :class:`Target`."""


class ArtifactKind(str, Enum):
    """The three output file shapes."""

    COMPOSE = "compose"
    TERRAFORM = "terraform"
    KUBERNETES = "kubernetes"


class Target(str, Enum):
    """Valid values for the ``target`` argument of ``generate``."""

    COMPOSE = "compose"
    TERRAFORM = "terraform"
    KUBERNETES = "kubernetes"
    ALL = "all"

    @classmethod
    def parse(cls, value: str) -> "Target":
        """Return the :class:`Target` named *value*.

        Raises :class:`UnknownTargetError` listing the accepted values.
        """
        try:
            return cls(value)
        except ValueError:
            accepted = ", ".join(t.value for t in cls)
            raise UnknownTargetError(
                f"Unknown target: {value} (expected one of: {accepted})"
            ) from None

    @property
    def kinds(self) -> Tuple[ArtifactKind, ...]:
        return TARGET_KINDS[self]


#: Ordered dispatch table: which artifact kinds each target writes.
TARGET_KINDS: Dict[Target, Tuple[ArtifactKind, ...]] = {
    Target.COMPOSE: (ArtifactKind.COMPOSE,),
    Target.TERRAFORM: (ArtifactKind.TERRAFORM,),
    Target.KUBERNETES: (ArtifactKind.KUBERNETES,),
    Target.ALL: (
        ArtifactKind.COMPOSE,
        ArtifactKind.TERRAFORM,
        ArtifactKind.KUBERNETES,
    ),
}

#: Cloud directories under ``deploy/terraform/`` that may receive a tfvars file.
KNOWN_CLOUDS: Tuple[str, ...] = ("aws", "azure", "gcp")

DEFAULT_TARGET = Target.ALL.value
DEFAULT_PROFILE = "dev"
DEFAULT_CONTAINER_USER = "devai"


class FieldSpec(BaseModel):
    """One templated value: ``name`` is the ``${TOKEN}``, ``default`` the fallback."""

    name: str
    key_path: str
    default: str


class ConfigSources(BaseModel):
    """Source documents for one run.

    ``common_docs`` holds every ``config/common/*.yaml`` document in
    filename order.  ``profile_doc`` is empty when the overlay is absent.
    """

    profile: str
    profile_doc: Dict[str, Any] = Field(default_factory=dict)
    common_docs: List[Dict[str, Any]] = Field(default_factory=list)


class GeneratorSettings(BaseModel):
    """Explicit configuration for one generator invocation.

    Built once by :func:`devai_lab.workflow.generate_config.build_settings`
    and passed to every operation.
    """

    project_root: Path
    clouds: List[str] = Field(default_factory=list)
    user_id: int = 1000
    group_id: int = 1000
    container_user: str = DEFAULT_CONTAINER_USER

    @property
    def config_dir(self) -> Path:
        return self.project_root / "config"

    @property
    def deploy_dir(self) -> Path:
        return self.project_root / "deploy"

    def artifact_path(self, kind: ArtifactKind, cloud: Optional[str] = None) -> Path:
        """Return the fixed destination path for *kind*."""
        if kind is ArtifactKind.COMPOSE:
            return self.deploy_dir / "compose" / ".env"
        if kind is ArtifactKind.TERRAFORM:
            if not cloud:
                raise ValueError("terraform artifacts need a cloud name")
            return self.deploy_dir / "terraform" / cloud / "terraform.tfvars"
        return self.deploy_dir / "kubernetes" / "base" / "configmap.yaml"


@dataclass
class GeneratedArtifact:
    """A file written by one ``generate`` call."""

    kind: ArtifactKind
    path: Path
    cloud: Optional[str] = None


# ---------------------------------------------------------------------------
# Scalar normalization
# ---------------------------------------------------------------------------

def normalize_scalar(value: Any) -> Optional[str]:
    """Render a YAML scalar the way ``yq -r`` prints it.

    - ``None`` / ``""`` / ``"null"`` → ``None`` (treated as absent)
    - ``True`` / ``False`` → ``"true"`` / ``"false"``
    - mappings and sequences → ``None``
    - anything else → ``str(value)``
    """
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if text in ("", "null"):
        return None
    return text
