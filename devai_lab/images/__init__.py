"""Container base-image helpers (CUDA tag lookup, Dockerfile rewrite)."""

from devai_lab.images.cuda import (
    DEFAULT_UBUNTU_VERSION,
    CudaRelease,
    ImageLookupError,
    fetch_cuda_tags,
    group_by_version,
    parse_selection,
    recommend,
    update_dockerfile,
)

__all__ = [
    "DEFAULT_UBUNTU_VERSION",
    "CudaRelease",
    "ImageLookupError",
    "fetch_cuda_tags",
    "group_by_version",
    "parse_selection",
    "recommend",
    "update_dockerfile",
]
