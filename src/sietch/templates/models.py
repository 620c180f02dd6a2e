"""Pydantic models for vault templates."""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _StrictModel(BaseModel):
    """Shared strict model settings for template contracts."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


def _normalize_string_list(values: list[str]) -> list[str]:
    """Trim whitespace and drop empty entries while preserving order."""
    normalized: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        cleaned = value.strip()
        if cleaned:
            normalized.append(cleaned)
    return normalized


def _normalize_relative_path(value: str) -> str:
    return str(PurePosixPath(value.strip().replace("\\", "/")))


class VaultDefaults(_StrictModel):
    """Default vault configuration declared by a template.

    Sizes are human-readable strings ("4MB", "512KB") and are copied into
    the manifest verbatim.
    """

    chunking_strategy: str = "fixed"
    chunk_size: str = "4MB"
    hash_algorithm: str = "sha256"
    compression: str = "none"
    sync_mode: str = "manual"
    enable_dedup: bool = True
    dedup_strategy: str = "content"
    dedup_min_size: str = "1KB"
    dedup_max_size: str = "64MB"
    dedup_gc_threshold: int = 1000
    dedup_index_enabled: bool = True
    dedup_cross_file: bool = True
    rsa_key_size: int | None = None

    @field_validator(
        "chunking_strategy",
        "chunk_size",
        "hash_algorithm",
        "compression",
        "sync_mode",
        "dedup_strategy",
        "dedup_min_size",
        "dedup_max_size",
    )
    @classmethod
    def normalize_text_fields(cls, value: str) -> str:
        return value.strip()


class TemplateFile(_StrictModel):
    """A file materialized into every vault created from the template."""

    path: str
    content: str = ""
    mode: str = ""

    @field_validator("path")
    @classmethod
    def normalize_path(cls, value: str) -> str:
        return _normalize_relative_path(value)

    @field_validator("mode")
    @classmethod
    def normalize_mode(cls, value: str) -> str:
        return value.strip()


class VaultTemplate(_StrictModel):
    """A named, reusable descriptor of a vault's initial layout and defaults."""

    name: str
    description: str = ""
    version: str
    author: str = ""
    tags: list[str] = Field(default_factory=list)
    directories: list[str] = Field(default_factory=list)
    files: list[TemplateFile] = Field(default_factory=list)
    config: VaultDefaults = Field(default_factory=VaultDefaults)

    @field_validator("name", "description", "version", "author")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, values: list[str]) -> list[str]:
        # Tags behave as a set; first occurrence wins.
        return list(dict.fromkeys(_normalize_string_list(values)))

    @field_validator("directories")
    @classmethod
    def normalize_directories(cls, values: list[str]) -> list[str]:
        return [_normalize_relative_path(v) for v in _normalize_string_list(values)]
