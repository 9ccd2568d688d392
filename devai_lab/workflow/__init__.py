"""Orchestration workflows (configuration generation)."""

from devai_lab.workflow.generate_config import (
    EXIT_SUCCESS,
    EXIT_TOOLCHAIN,
    EXIT_USAGE,
    EXIT_WRITE_FAILURE,
    YamlSupportError,
    build_settings,
    discover_clouds,
    ensure_yaml_support,
    generate,
    run_generate,
)

__all__ = [
    "EXIT_SUCCESS",
    "EXIT_TOOLCHAIN",
    "EXIT_USAGE",
    "EXIT_WRITE_FAILURE",
    "YamlSupportError",
    "build_settings",
    "discover_clouds",
    "ensure_yaml_support",
    "generate",
    "run_generate",
]
