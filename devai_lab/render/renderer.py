"""Text template renderer — replaces ``${TOKEN}`` placeholders.

This module is the Python equivalent of the here-documents in
``scripts/generate-config.sh``.  It performs **text-level** token
replacement so template layout and comments are preserved byte-for-byte
across runs.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\$\{(\w+)\}")


# ── public API ───────────────────────────────────────────────────────


def render_template(
    template_text: str,
    substitutions: Dict[str, str],
    *,
    required_keys: Optional[FrozenSet[str]] = None,
) -> str:
    """Replace all ``${KEY}`` tokens in *template_text*.

    Parameters
    ----------
    template_text:
        Raw template content.
    substitutions:
        Mapping of token name → value (e.g. ``{"PROFILE": "dev"}``).
    required_keys:
        Set of keys that **must** be present in *substitutions* with a
        non-empty value.  Defaults to no required keys.

    Returns
    -------
    str
        Template text with every ``${KEY}`` replaced by its value.
        Tokens without a substitution are left untouched, and a value
        that itself contains ``${...}`` is inserted literally.

    Raises
    ------
    ValueError
        If a required key is missing or has an empty value.
    """
    if required_keys is None:
        required_keys = frozenset()

    missing: List[str] = sorted(
        k for k in required_keys if not substitutions.get(k)
    )
    if missing:
        raise ValueError(
            f"Missing required substitution key(s): {', '.join(missing)}"
        )

    # single pass: substituted values are never scanned for tokens again
    return _TOKEN_RE.sub(
        lambda m: substitutions.get(m.group(1), m.group(0)), template_text
    )


def write_rendered(path: str | Path, text: str) -> Path:
    """Write *text* to *path*, truncating any existing file.

    The parent directory must already exist; a missing directory raises
    :class:`FileNotFoundError` and nothing is written.
    """
    path = Path(path)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)
    logger.info("Generated %s", path)
    return path
