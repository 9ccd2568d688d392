"""Configuration models and layered source resolution.

Only the models are re-exported here; :mod:`devai_lab.config.sources`
needs PyYAML and is imported after the toolchain check.
"""

from devai_lab.config.models import (
    DEFAULT_PROFILE,
    DEFAULT_TARGET,
    KNOWN_CLOUDS,
    TARGET_KINDS,
    ArtifactKind,
    ConfigSources,
    FieldSpec,
    GeneratedArtifact,
    GeneratorSettings,
    Target,
    UnknownTargetError,
    normalize_scalar,
)

__all__ = [
    "DEFAULT_PROFILE",
    "DEFAULT_TARGET",
    "KNOWN_CLOUDS",
    "TARGET_KINDS",
    "ArtifactKind",
    "ConfigSources",
    "FieldSpec",
    "GeneratedArtifact",
    "GeneratorSettings",
    "Target",
    "UnknownTargetError",
    "normalize_scalar",
]
