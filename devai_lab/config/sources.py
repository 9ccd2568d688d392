"""Layered YAML source loading and per-key value resolution.

This module is the Python equivalent of the ``yaml_get`` helper in
``scripts/generate-config.sh``.  It provides:

- :func:`load_yaml_document` — read one YAML mapping, ``{}`` on any problem
- :func:`load_sources` — read ``config/common/*.yaml`` + the profile overlay
- :func:`lookup` — walk a dotted key path through one document
- :func:`resolve_value` — profile → common → literal default, per key
- :func:`resolve_fields` — resolve a whole artifact field table

Resolution is per key, not per merged document: one artifact may take
some values from the profile overlay and others from the common files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from devai_lab.config.models import ConfigSources, FieldSpec, normalize_scalar

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_yaml_document(path: str | Path) -> Dict[str, Any]:
    """Load one YAML document as a mapping.

    A missing file, a parse error or a non-mapping root all yield ``{}``
    so that every lookup falls through to its default.
    """
    path = Path(path)
    if not path.is_file():
        logger.debug("Config document not found: %s", path)
        return {}
    try:
        with open(path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.debug("Ignoring unreadable config document %s: %s", path, exc)
        return {}
    if not isinstance(raw, dict):
        logger.debug("Ignoring non-mapping config document %s", path)
        return {}
    return raw


def load_sources(config_dir: str | Path, profile: str) -> ConfigSources:
    """Read the common documents and the overlay for *profile*.

    Common documents are ``<config_dir>/common/*.yaml`` in filename order;
    the overlay is ``<config_dir>/profiles/<profile>.yaml``.
    """
    config_dir = Path(config_dir)
    common_dir = config_dir / "common"
    common_docs = []
    if common_dir.is_dir():
        for doc_path in sorted(common_dir.glob("*.yaml")):
            common_docs.append(load_yaml_document(doc_path))

    profile_doc = load_yaml_document(config_dir / "profiles" / f"{profile}.yaml")
    return ConfigSources(
        profile=profile,
        profile_doc=profile_doc,
        common_docs=common_docs,
    )


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def lookup(document: Dict[str, Any], key_path: str) -> Optional[str]:
    """Return the normalized scalar at dotted *key_path*, or ``None``."""
    node: Any = document
    for part in key_path.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return normalize_scalar(node)


def resolve_value(sources: ConfigSources, key_path: str, default: str) -> str:
    """Return the effective value for *key_path*.

    Cascade: profile overlay → common documents (filename order) → *default*.
    """
    value = lookup(sources.profile_doc, key_path)
    if value is not None:
        return value
    for document in sources.common_docs:
        value = lookup(document, key_path)
        if value is not None:
            return value
    return default


def resolve_fields(
    sources: ConfigSources, fields: Iterable[FieldSpec]
) -> Dict[str, str]:
    """Resolve every field of an artifact into a ``{name: value}`` dict."""
    return {
        spec.name: resolve_value(sources, spec.key_path, spec.default)
        for spec in fields
    }
