"""Tests for devai_lab.config.sources — layered lookup and defaults."""

from __future__ import annotations

from pathlib import Path

from devai_lab.config.models import ConfigSources, FieldSpec, normalize_scalar
from devai_lab.config.sources import (
    load_sources,
    load_yaml_document,
    lookup,
    resolve_fields,
    resolve_value,
)


def _sources(profile_doc=None, *common_docs) -> ConfigSources:
    return ConfigSources(
        profile="test",
        profile_doc=profile_doc or {},
        common_docs=list(common_docs),
    )


# ── normalize_scalar ─────────────────────────────────────────────────


class TestNormalizeScalar:
    def test_none_is_absent(self):
        assert normalize_scalar(None) is None

    def test_empty_string_is_absent(self):
        assert normalize_scalar("") is None

    def test_null_string_is_absent(self):
        assert normalize_scalar("null") is None

    def test_bool_lowercase(self):
        assert normalize_scalar(True) == "true"
        assert normalize_scalar(False) == "false"

    def test_int(self):
        assert normalize_scalar(4) == "4"

    def test_mapping_is_absent(self):
        assert normalize_scalar({"a": 1}) is None
        assert normalize_scalar([1, 2]) is None


# ── load_yaml_document ───────────────────────────────────────────────


class TestLoadYamlDocument:
    def test_missing_file(self, tmp_path: Path):
        assert load_yaml_document(tmp_path / "nope.yaml") == {}

    def test_valid_mapping(self, tmp_path: Path):
        p = tmp_path / "a.yaml"
        p.write_text("app:\n  name: x\n")
        assert load_yaml_document(p) == {"app": {"name": "x"}}

    def test_malformed_yaml_degrades(self, tmp_path: Path):
        p = tmp_path / "bad.yaml"
        p.write_text("app: [unclosed\n")
        assert load_yaml_document(p) == {}

    def test_non_mapping_root(self, tmp_path: Path):
        p = tmp_path / "list.yaml"
        p.write_text("- a\n- b\n")
        assert load_yaml_document(p) == {}

    def test_empty_file(self, tmp_path: Path):
        p = tmp_path / "empty.yaml"
        p.write_text("")
        assert load_yaml_document(p) == {}


# ── load_sources ─────────────────────────────────────────────────────


class TestLoadSources:
    def test_reads_common_in_filename_order(self, project: Path):
        sources = load_sources(project / "config", "prod")
        assert len(sources.common_docs) == 2
        assert "app" in sources.common_docs[0]  # env.yaml
        assert "services" in sources.common_docs[1]  # ports.yaml

    def test_profile_loaded(self, project: Path):
        sources = load_sources(project / "config", "prod")
        assert sources.profile == "prod"
        assert sources.profile_doc["resources"]["cpu"] == 4

    def test_missing_profile_is_empty(self, project: Path):
        sources = load_sources(project / "config", "staging")
        assert sources.profile_doc == {}

    def test_missing_config_dir(self, tmp_path: Path):
        sources = load_sources(tmp_path / "config", "dev")
        assert sources.common_docs == []
        assert sources.profile_doc == {}


# ── lookup / resolve_value ───────────────────────────────────────────


class TestLookup:
    def test_nested(self):
        assert lookup({"a": {"b": {"c": 1}}}, "a.b.c") == "1"

    def test_missing_leaf(self):
        assert lookup({"a": {"b": {}}}, "a.b.c") is None

    def test_path_through_scalar(self):
        assert lookup({"a": "x"}, "a.b") is None

    def test_top_level(self):
        assert lookup({"replicas": 2}, "replicas") == "2"


class TestResolveValue:
    def test_default_when_absent_everywhere(self):
        assert resolve_value(_sources(), "resources.cpu", "2") == "2"

    def test_common_used_when_profile_absent(self):
        src = _sources({}, {"app": {"name": "from-common"}})
        assert resolve_value(src, "app.name", "devai-lab") == "from-common"

    def test_profile_beats_common(self):
        src = _sources(
            {"resources": {"cpu": 8}},
            {"resources": {"cpu": 2}},
        )
        assert resolve_value(src, "resources.cpu", "1") == "8"

    def test_first_common_document_wins(self):
        src = _sources({}, {"x": "first"}, {"x": "second"})
        assert resolve_value(src, "x", "d") == "first"

    def test_false_in_profile_is_a_value(self):
        src = _sources({"features": {"https": False}}, {"features": {"https": True}})
        assert resolve_value(src, "features.https", "x") == "false"

    def test_empty_string_falls_through(self):
        src = _sources({"app": {"name": ""}}, {"app": {"name": "common"}})
        assert resolve_value(src, "app.name", "d") == "common"

    def test_per_key_mixing(self):
        src = _sources(
            {"resources": {"cpu": 4}},
            {"app": {"name": "lab"}, "resources": {"memory": 1024}},
        )
        fields = [
            FieldSpec(name="NAME", key_path="app.name", default="d"),
            FieldSpec(name="CPU", key_path="resources.cpu", default="2"),
            FieldSpec(name="MEM", key_path="resources.memory", default="4096"),
            FieldSpec(name="DISK", key_path="resources.storage", default="50"),
        ]
        assert resolve_fields(src, fields) == {
            "NAME": "lab",
            "CPU": "4",
            "MEM": "1024",
            "DISK": "50",
        }
