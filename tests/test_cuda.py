"""Tests for devai_lab.images.cuda — tag grouping, recommendation, Dockerfile rewrite."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from devai_lab.images.cuda import (
    DOCKER_HUB_TAGS_URL,
    CudaRelease,
    ImageLookupError,
    fetch_cuda_tags,
    group_by_version,
    is_cudnn_runtime_tag,
    parse_selection,
    recommend,
    update_dockerfile,
)

TAGS = [
    "13.0.1-cudnn-runtime-ubuntu24.04",
    "13.0.0-cudnn-runtime-ubuntu24.04",
    "12.9.1-cudnn-runtime-ubuntu24.04",
    "12.9.0-cudnn-runtime-ubuntu24.04",
    "12.8.1-cudnn-runtime-ubuntu24.04",
    "12.6.3-cudnn-runtime-ubuntu24.04",
]

DOCKERFILE = (
    "# GPU image\n"
    "FROM docker.io/nvidia/cuda:12.6.3-cudnn-runtime-ubuntu24.04\n"
    "RUN echo hi\n"
)


def _session(payload=None, *, exc=None, status_exc=None) -> MagicMock:
    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
        return session
    resp = MagicMock()
    resp.json.return_value = payload
    if status_exc is not None:
        resp.raise_for_status.side_effect = status_exc
    session.get.return_value = resp
    return session


# ── fetch_cuda_tags ──────────────────────────────────────────────────


class TestFetchCudaTags:
    def test_filters_and_sorts(self):
        payload = {
            "results": [
                {"name": "12.8.1-cudnn-runtime-ubuntu24.04"},
                {"name": "12.9.1-cudnn-devel-ubuntu24.04"},
                {"name": "12.9.1-runtime-ubuntu24.04"},
                {"name": "12.9.1-cudnn-runtime-ubuntu24.04"},
            ]
        }
        tags = fetch_cuda_tags("24.04", session=_session(payload))
        assert tags == [
            "12.9.1-cudnn-runtime-ubuntu24.04",
            "12.8.1-cudnn-runtime-ubuntu24.04",
        ]

    def test_query_params(self):
        session = _session({"results": []})
        fetch_cuda_tags("22.04", session=session)
        args, kwargs = session.get.call_args
        assert args[0] == DOCKER_HUB_TAGS_URL
        assert kwargs["params"] == {
            "page_size": 100,
            "name": "cudnn-runtime-ubuntu22.04",
        }

    def test_network_error(self):
        session = _session(exc=requests.ConnectionError("down"))
        with pytest.raises(ImageLookupError, match="Docker Hub"):
            fetch_cuda_tags(session=session)

    def test_http_error(self):
        session = _session({}, status_exc=requests.HTTPError("503"))
        with pytest.raises(ImageLookupError):
            fetch_cuda_tags(session=session)

    def test_invalid_json(self):
        session = _session()
        session.get.return_value.json.side_effect = ValueError("not json")
        with pytest.raises(ImageLookupError, match="invalid JSON"):
            fetch_cuda_tags(session=session)


class TestIsCudnnRuntimeTag:
    def test_cudnn9_variant(self):
        assert is_cudnn_runtime_tag("12.4.1-cudnn9-runtime-ubuntu22.04")

    def test_devel_rejected(self):
        assert not is_cudnn_runtime_tag("12.4.1-cudnn-devel-runtime-ubuntu22.04")


# ── grouping / recommendation ────────────────────────────────────────


class TestGroupByVersion:
    def test_latest_patch_per_branch(self):
        releases = group_by_version(TAGS)
        assert [r.version for r in releases] == ["13.0.1", "12.9.1", "12.8.1", "12.6.3"]

    def test_numeric_not_lexical_ordering(self):
        releases = group_by_version([
            "12.10.0-cudnn-runtime-ubuntu24.04",
            "12.9.1-cudnn-runtime-ubuntu24.04",
        ])
        assert [r.branch for r in releases] == ["12.10", "12.9"]

    def test_ignores_unversioned(self):
        assert group_by_version(["latest-cudnn-runtime-ubuntu24.04"]) == []

    def test_release_image(self):
        r = CudaRelease(12, 9, 1, "12.9.1-cudnn-runtime-ubuntu24.04")
        assert r.image == "docker.io/nvidia/cuda:12.9.1-cudnn-runtime-ubuntu24.04"


class TestRecommend:
    def test_second_newest_major(self):
        assert recommend(group_by_version(TAGS)).version == "12.9.1"

    def test_single_major(self):
        releases = group_by_version(TAGS[2:])
        assert recommend(releases).version == "12.9.1"

    def test_empty_raises(self):
        with pytest.raises(ImageLookupError):
            recommend([])


class TestParseSelection:
    def setup_method(self):
        self.releases = group_by_version(TAGS)
        self.recommended = recommend(self.releases)

    def test_enter_picks_recommended(self):
        assert parse_selection("", self.releases, self.recommended) is self.recommended

    def test_quit(self):
        assert parse_selection("Q", self.releases, self.recommended) is None

    def test_number(self):
        assert parse_selection("1", self.releases, self.recommended).version == "13.0.1"

    def test_out_of_range(self):
        with pytest.raises(ValueError, match="between 1 and 4"):
            parse_selection("9", self.releases, self.recommended)

    def test_garbage(self):
        with pytest.raises(ValueError):
            parse_selection("abc", self.releases, self.recommended)


# ── update_dockerfile ────────────────────────────────────────────────


class TestUpdateDockerfile:
    def test_rewrites_from_line(self, tmp_path: Path):
        df = tmp_path / "Dockerfile.gpu"
        df.write_text(DOCKERFILE)
        old, new = update_dockerfile(df, "12.9.1-cudnn-runtime-ubuntu24.04")
        assert old == "FROM docker.io/nvidia/cuda:12.6.3-cudnn-runtime-ubuntu24.04"
        assert new == "FROM docker.io/nvidia/cuda:12.9.1-cudnn-runtime-ubuntu24.04"
        assert df.read_text() == (
            "# GPU image\n"
            "FROM docker.io/nvidia/cuda:12.9.1-cudnn-runtime-ubuntu24.04\n"
            "RUN echo hi\n"
        )

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ImageLookupError, match="not found"):
            update_dockerfile(tmp_path / "nope", "x")

    def test_no_cuda_from_line(self, tmp_path: Path):
        df = tmp_path / "Dockerfile"
        df.write_text("FROM debian:trixie-slim\n")
        with pytest.raises(ImageLookupError, match="FROM line"):
            update_dockerfile(df, "x")
        assert df.read_text() == "FROM debian:trixie-slim\n"
