"""Template rendering for the compose, terraform and kubernetes artifacts."""

from devai_lab.render.artifacts import (
    ARTIFACT_FIELDS,
    ARTIFACT_TEMPLATES,
    HEADER_KEYS,
    render_artifact,
)
from devai_lab.render.renderer import render_template, write_rendered

__all__ = [
    "ARTIFACT_FIELDS",
    "ARTIFACT_TEMPLATES",
    "HEADER_KEYS",
    "render_artifact",
    "render_template",
    "write_rendered",
]
