"""Shared fixtures: a throwaway DevAI Lab project tree."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from devai_lab.config.models import GeneratorSettings

ENV_YAML = textwrap.dedent("""\
    app:
      name: devai-lab
    ollama:
      host: http://ollama:11434
""")

PORTS_YAML = textwrap.dedent("""\
    services:
      jupyter:
        host: 8888
        container: 8888
      ollama:
        host: 11434
""")

PROD_YAML = textwrap.dedent("""\
    resources:
      cpu: 4
      memory: 16384
      storage: 200
    replicas: 3
    features:
      https: true
""")


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    """Project root with config sources and the deploy directories."""
    (tmp_path / "config" / "common").mkdir(parents=True)
    (tmp_path / "config" / "profiles").mkdir(parents=True)
    (tmp_path / "config" / "common" / "env.yaml").write_text(ENV_YAML)
    (tmp_path / "config" / "common" / "ports.yaml").write_text(PORTS_YAML)
    (tmp_path / "config" / "profiles" / "prod.yaml").write_text(PROD_YAML)
    (tmp_path / "deploy" / "compose").mkdir(parents=True)
    (tmp_path / "deploy" / "kubernetes" / "base").mkdir(parents=True)
    (tmp_path / "deploy" / "terraform" / "aws").mkdir(parents=True)
    return tmp_path


@pytest.fixture()
def settings(project: Path) -> GeneratorSettings:
    return GeneratorSettings(
        project_root=project,
        clouds=["aws"],
        user_id=1234,
        group_id=5678,
    )
