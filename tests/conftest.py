"""Test fixtures for sietch tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from sietch.settings import ScaffoldSettings
from sietch.templates.models import TemplateFile, VaultDefaults, VaultTemplate

PHOTO_VAULT_YAML = """\
name: photoVault
description: Photo library vault
version: "1.0.0"
tags: [photos, media]
config:
  chunking_strategy: cdc
  chunk_size: 8MB
  hash_algorithm: sha256
  compression: zstd
  sync_mode: manual
  enable_dedup: true
  dedup_strategy: content
  dedup_min_size: 4KB
  dedup_max_size: 64MB
  dedup_gc_threshold: 750
  dedup_index_enabled: false
  dedup_cross_file: true
directories: [photos, thumbnails]
files:
  - path: config/defaults.yaml
    mode: "0600"
    content: |
      thumbnail_size: 256
"""


@pytest.fixture(autouse=True)
def _isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep every test away from the real ~/.config/sietch."""
    monkeypatch.setenv("SIETCH_CONFIG_HOME", str(tmp_path / "config-home"))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)


def make_test_settings(config_home: Path) -> ScaffoldSettings:
    """Settings with cheap scrypt and RSA costs."""
    return ScaffoldSettings(
        config_home=config_home,
        scrypt_n=2**10,
        scrypt_r=8,
        scrypt_p=1,
        pbkdf2_iterations=1000,
        rsa_key_size=2048,
    )


def make_test_template(
    name: str = "testVault",
    directories: list[str] | None = None,
    files: list[TemplateFile] | None = None,
    tags: list[str] | None = None,
    **config: object,
) -> VaultTemplate:
    """Create a minimal template for testing."""
    return VaultTemplate(
        name=name,
        description=f"Test template {name}",
        version="1.0.0",
        tags=tags if tags is not None else ["test"],
        directories=directories if directories is not None else ["docs"],
        files=files if files is not None else [
            TemplateFile(path="notes/readme.txt", content="hello\n", mode="0644")
        ],
        config=VaultDefaults(**config),
    )


@pytest.fixture()
def settings(tmp_path: Path) -> ScaffoldSettings:
    return make_test_settings(tmp_path / "config-home")


@pytest.fixture()
def templates_dir(settings: ScaffoldSettings) -> Path:
    settings.templates_dir.mkdir(parents=True, exist_ok=True)
    (settings.templates_dir / "photoVault.yaml").write_text(PHOTO_VAULT_YAML, encoding="utf-8")
    return settings.templates_dir


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty current working directory."""
    d = tmp_path / "work"
    d.mkdir()
    monkeypatch.chdir(d)
    return d
