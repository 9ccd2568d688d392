"""Container registry push (ECR, ACR, Artifact Registry)."""

from devai_lab.registry.push import (
    SUPPORTED_CLOUDS,
    PushError,
    PushOptions,
    build_image,
    push_image,
    terraform_output,
)

__all__ = [
    "SUPPORTED_CLOUDS",
    "PushError",
    "PushOptions",
    "build_image",
    "push_image",
    "terraform_output",
]
