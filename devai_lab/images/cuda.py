"""NVIDIA CUDA base-image selection for the GPU Dockerfile.

Replaces ``scripts/select-cuda-image.sh``: queries Docker Hub for
``nvidia/cuda`` cuDNN runtime tags, groups them by ``major.minor``,
recommends one and rewrites the Dockerfile's ``FROM`` line.

The recommendation is the newest release of the *second-newest* major
line, because the newest major is usually too fresh for PyTorch wheels.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

logger = logging.getLogger(__name__)

# ── constants ────────────────────────────────────────────────────────

DOCKER_HUB_TAGS_URL = "https://registry.hub.docker.com/v2/repositories/nvidia/cuda/tags"
PAGE_SIZE = 100
DEFAULT_UBUNTU_VERSION = "24.04"
IMAGE_REPOSITORY = "docker.io/nvidia/cuda"
REQUEST_TIMEOUT = 30

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")
_FROM_RE = re.compile(r"^FROM.*nvidia/cuda:.*$", re.MULTILINE)


class ImageLookupError(RuntimeError):
    """Raised when CUDA tags cannot be fetched, parsed or applied."""


@dataclass(frozen=True)
class CudaRelease:
    """Latest patch release of one ``major.minor`` CUDA branch."""

    major: int
    minor: int
    patch: int
    tag: str

    @property
    def branch(self) -> str:
        return f"{self.major}.{self.minor}"

    @property
    def version(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def image(self) -> str:
        return f"{IMAGE_REPOSITORY}:{self.tag}"


# ── Docker Hub ───────────────────────────────────────────────────────


def is_cudnn_runtime_tag(name: str) -> bool:
    """True for ``X.Y.Z-cudnn[N]-runtime-ubuntuAA.BB`` style tags."""
    return "cudnn" in name and "runtime-ubuntu" in name and "devel" not in name


def fetch_cuda_tags(
    ubuntu_version: str = DEFAULT_UBUNTU_VERSION,
    *,
    session: Optional[requests.Session] = None,
) -> List[str]:
    """Return cuDNN runtime tag names for *ubuntu_version*, newest first.

    Raises
    ------
    ImageLookupError
        On HTTP errors or an unparseable response.
    """
    http = session or requests.Session()
    params = {
        "page_size": PAGE_SIZE,
        "name": f"cudnn-runtime-ubuntu{ubuntu_version}",
    }
    try:
        resp = http.get(DOCKER_HUB_TAGS_URL, params=params, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        body: Dict[str, Any] = resp.json()
    except requests.RequestException as exc:
        raise ImageLookupError(
            f"Failed to fetch tags from Docker Hub: {exc}"
        ) from exc
    except ValueError as exc:
        raise ImageLookupError(f"Docker Hub returned invalid JSON: {exc}") from exc

    names = [r.get("name", "") for r in body.get("results", []) or []]
    tags = [n for n in names if n and is_cudnn_runtime_tag(n)]
    logger.debug("Docker Hub returned %d matching tags", len(tags))
    return sorted(tags, reverse=True)


# ── grouping / recommendation ────────────────────────────────────────


def group_by_version(tags: Sequence[str]) -> List[CudaRelease]:
    """Keep the highest patch per ``major.minor``, newest branch first.

    Tags that do not start with ``X.Y.Z`` are ignored.
    """
    latest: Dict[Tuple[int, int], CudaRelease] = {}
    for tag in tags:
        match = _VERSION_RE.match(tag)
        if not match:
            continue
        major, minor, patch = (int(g) for g in match.groups())
        current = latest.get((major, minor))
        if current is None or patch > current.patch:
            latest[(major, minor)] = CudaRelease(major, minor, patch, tag)
    return [latest[key] for key in sorted(latest, reverse=True)]


def recommend(releases: Sequence[CudaRelease]) -> CudaRelease:
    """Newest release from the second-newest major line (or the only one)."""
    if not releases:
        raise ImageLookupError("No CUDA+cuDNN runtime images to choose from")
    majors = sorted({r.major for r in releases}, reverse=True)
    wanted = majors[1] if len(majors) >= 2 else majors[0]
    candidates = [r for r in releases if r.major == wanted]
    return max(candidates, key=lambda r: (r.minor, r.patch))


def parse_selection(
    raw: str,
    releases: Sequence[CudaRelease],
    recommended: CudaRelease,
) -> Optional[CudaRelease]:
    """Interpret an interactive menu answer.

    Empty input picks *recommended*, ``q`` cancels (``None``), a 1-based
    number picks that row.  Anything else raises :class:`ValueError`.
    """
    answer = raw.strip()
    if not answer:
        return recommended
    if answer.lower() == "q":
        return None
    if answer.isdigit() and 1 <= int(answer) <= len(releases):
        return releases[int(answer) - 1]
    raise ValueError(
        f"Invalid selection. Please enter a number between 1 and {len(releases)}."
    )


# ── Dockerfile rewrite ───────────────────────────────────────────────


def update_dockerfile(path: str | Path, tag: str) -> Tuple[str, str]:
    """Point every ``FROM ...nvidia/cuda:...`` line of *path* at *tag*.

    Returns ``(old_from_line, new_from_line)``.

    Raises
    ------
    ImageLookupError
        If the file or its ``nvidia/cuda`` FROM line is missing.
    """
    path = Path(path)
    if not path.is_file():
        raise ImageLookupError(f"Dockerfile not found: {path}")

    text = path.read_text(encoding="utf-8")
    match = _FROM_RE.search(text)
    if match is None:
        raise ImageLookupError(f"Could not find nvidia/cuda FROM line in {path}")

    new_line = f"FROM {IMAGE_REPOSITORY}:{tag}"
    path.write_text(_FROM_RE.sub(new_line, text), encoding="utf-8")
    logger.info("Updated %s with %s", path, new_line)
    return match.group(0), new_line
