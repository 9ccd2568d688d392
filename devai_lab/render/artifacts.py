"""Fixed-shape templates for the three artifact kinds.

Each artifact declares an ordered tuple of :class:`FieldSpec` values
(token, dotted key path, literal default) and a template using
``${TOKEN}`` placeholders.  ``PROFILE`` and ``GENERATED`` are filled for
every artifact; the compose env-file also gets the operator's uid/gid.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple

from devai_lab.config.models import ArtifactKind, FieldSpec
from devai_lab.render.renderer import render_template

# ── field tables ─────────────────────────────────────────────────────

COMPOSE_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec(name="IMAGE_NAME", key_path="app.name", default="devai-lab"),
    FieldSpec(name="PORT", key_path="services.jupyter.host", default="8888"),
    FieldSpec(name="OLLAMA_PORT", key_path="services.ollama.host", default="11434"),
    FieldSpec(name="CPU", key_path="resources.cpu", default="2"),
    FieldSpec(name="MEMORY", key_path="resources.memory", default="4096"),
)

TERRAFORM_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec(name="PROJECT_NAME", key_path="app.name", default="devai-lab"),
    FieldSpec(name="CPU", key_path="resources.cpu", default="2"),
    FieldSpec(name="MEMORY", key_path="resources.memory", default="4096"),
    FieldSpec(name="STORAGE_SIZE_GB", key_path="resources.storage", default="50"),
    FieldSpec(name="REPLICAS", key_path="replicas", default="1"),
    FieldSpec(name="ENABLE_HTTPS", key_path="features.https", default="false"),
)

KUBERNETES_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec(name="APP_NAME", key_path="app.name", default="devai-lab"),
    FieldSpec(
        name="JUPYTER_PORT", key_path="services.jupyter.container", default="8888"
    ),
    FieldSpec(
        name="OLLAMA_HOST", key_path="ollama.host", default="http://ollama:11434"
    ),
)

ARTIFACT_FIELDS: Dict[ArtifactKind, Tuple[FieldSpec, ...]] = {
    ArtifactKind.COMPOSE: COMPOSE_FIELDS,
    ArtifactKind.TERRAFORM: TERRAFORM_FIELDS,
    ArtifactKind.KUBERNETES: KUBERNETES_FIELDS,
}

#: Tokens every artifact must receive with a non-empty value.
HEADER_KEYS: FrozenSet[str] = frozenset({"PROFILE", "GENERATED"})

# ── templates ────────────────────────────────────────────────────────

_HEADER = (
    "# Generated from config/ - do not edit directly\n"
    "# Profile: ${PROFILE}\n"
    "# Generated: ${GENERATED}\n"
)

COMPOSE_TEMPLATE = _HEADER + """
# Image settings
IMAGE_NAME=${IMAGE_NAME}
IMAGE_TAG=latest

# Port mappings
PORT=${PORT}
OLLAMA_PORT=${OLLAMA_PORT}

# Ollama host
OLLAMA_HOST=http://ollama:11434

# Working directory mount
HOST_WORK_DIR=./work

# User mapping
USER_ID=${USER_ID}
GROUP_ID=${GROUP_ID}
CONTAINER_USER=${CONTAINER_USER}

# Resource hints (for documentation, compose uses deploy.resources)
# CPU=${CPU}
# MEMORY=${MEMORY}

# API Keys (set these manually or via environment)
OPENAI_API_KEY=
ANTHROPIC_API_KEY=
GOOGLE_API_KEY=
"""

TERRAFORM_TEMPLATE = _HEADER + """
project_name = "${PROJECT_NAME}"
environment  = "${PROFILE}"

# Resources
cpu            = ${CPU}
memory         = ${MEMORY}
storage_size_gb = ${STORAGE_SIZE_GB}

# Scaling
replicas = ${REPLICAS}

# Features
enable_https = ${ENABLE_HTTPS}
enable_gpu   = false

# Network (customize as needed)
# allowed_cidrs = ["0.0.0.0/0"]

# Region (required - set this manually)
# region = "us-east-1"  # AWS
# region = "eastus"     # Azure
# region = "us-central1" # GCP
"""

KUBERNETES_TEMPLATE = _HEADER + """apiVersion: v1
kind: ConfigMap
metadata:
  name: devai-config
  labels:
    app: ${APP_NAME}
data:
  JUPYTER_PORT: "${JUPYTER_PORT}"
  OLLAMA_HOST: "${OLLAMA_HOST}"
  CONTAINER_USER: "${CONTAINER_USER}"
"""

ARTIFACT_TEMPLATES: Dict[ArtifactKind, str] = {
    ArtifactKind.COMPOSE: COMPOSE_TEMPLATE,
    ArtifactKind.TERRAFORM: TERRAFORM_TEMPLATE,
    ArtifactKind.KUBERNETES: KUBERNETES_TEMPLATE,
}


# ── rendering ────────────────────────────────────────────────────────


def render_artifact(
    kind: ArtifactKind,
    values: Dict[str, str],
    *,
    profile: str,
    timestamp: str,
    user_id: int = 1000,
    group_id: int = 1000,
    container_user: str = "devai",
) -> str:
    """Fill the template for *kind* with resolved *values*.

    *values* is the output of
    :func:`devai_lab.config.sources.resolve_fields` for
    ``ARTIFACT_FIELDS[kind]``.
    """
    subs = dict(values)
    subs["PROFILE"] = profile
    subs["GENERATED"] = timestamp
    subs["CONTAINER_USER"] = container_user
    if kind is ArtifactKind.COMPOSE:
        subs["USER_ID"] = str(user_id)
        subs["GROUP_ID"] = str(group_id)
    return render_template(
        ARTIFACT_TEMPLATES[kind], subs, required_keys=HEADER_KEYS
    )
