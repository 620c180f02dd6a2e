"""Tests for template YAML loading, the registry, and validation."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from conftest import PHOTO_VAULT_YAML, make_test_template

from sietch.templates.loader import load_template_directory, load_template_file
from sietch.templates.models import TemplateFile
from sietch.templates.registry import TemplateRegistry
from sietch.templates.validator import parse_size, validate_template, validate_template_file


def _write_yaml(directory: Path, filename: str, content: str) -> Path:
    path = directory / filename
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


class TestLoadTemplateFile:
    def test_load_full_template(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "photoVault.yaml", PHOTO_VAULT_YAML)
        template = load_template_file(path)

        assert template.name == "photoVault"
        assert template.version == "1.0.0"
        assert template.directories == ["photos", "thumbnails"]
        assert template.tags == ["photos", "media"]
        assert template.files[0].path == "config/defaults.yaml"
        assert template.files[0].mode == "0600"
        assert template.files[0].content == "thumbnail_size: 256\n"
        assert template.config.chunking_strategy == "cdc"
        assert template.config.compression == "zstd"
        assert template.config.dedup_gc_threshold == 750
        assert template.config.dedup_index_enabled is False

    def test_missing_config_uses_defaults(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "bare.yaml", """\
            name: bare
            version: "1.0"
        """)
        template = load_template_file(path)
        assert template.config.chunking_strategy == "fixed"
        assert template.config.chunk_size == "4MB"
        assert template.directories == []
        assert template.files == []

    def test_unquoted_octal_mode_keeps_its_text(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "octal.yaml", """\
            name: octal
            version: "1.0"
            files:
              - path: secret.txt
                content: x
                mode: 0600
        """)
        assert load_template_file(path).files[0].mode == "0600"

    def test_unquoted_decimal_looking_mode_keeps_its_text(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "exec.yaml", """\
            name: exec
            version: "1.0"
            files:
              - path: run.sh
                mode: 755
              - path: plain.txt
              - path: quoted.txt
                mode: "0640"
        """)
        modes = [f.mode for f in load_template_file(path).files]
        assert modes == ["755", "", "0640"]

    def test_numeric_version_becomes_text(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "num.yaml", """\
            name: num
            version: 2.1
        """)
        assert load_template_file(path).version == "2.1"

    def test_empty_file_raises(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "empty.yaml", "")
        with pytest.raises(ValueError, match="Empty template"):
            load_template_file(path)

    def test_unknown_config_key_rejected(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "odd.yaml", """\
            name: odd
            version: "1.0"
            config:
              chunk_sise: 4MB
        """)
        with pytest.raises(ValueError):
            load_template_file(path)

    def test_duplicate_tags_collapse(self):
        template = make_test_template(tags=["a", "b", "a", " "])
        assert template.tags == ["a", "b"]


class TestLoadTemplateDirectory:
    def test_loads_all_and_skips_underscore(self, tmp_path: Path):
        _write_yaml(tmp_path, "photoVault.yaml", PHOTO_VAULT_YAML)
        _write_yaml(tmp_path, "_draft.yaml", "name: draft\nversion: '1'\n")
        registry = TemplateRegistry()
        assert load_template_directory(tmp_path, registry) == 1
        assert registry.get("photoVault") is not None
        assert registry.get("draft") is None

    def test_broken_file_is_logged_and_skipped(self, tmp_path: Path, caplog):
        _write_yaml(tmp_path, "photoVault.yaml", PHOTO_VAULT_YAML)
        _write_yaml(tmp_path, "broken.yaml", "name: [unclosed\n")
        registry = TemplateRegistry()
        assert load_template_directory(tmp_path, registry) == 1
        assert "Failed to load template" in caplog.text

    def test_missing_directory_returns_zero(self, tmp_path: Path):
        assert load_template_directory(tmp_path / "nope", TemplateRegistry()) == 0


class TestTemplateRegistry:
    def test_register_and_find_by_tag(self):
        registry = TemplateRegistry()
        t = make_test_template("alpha", tags=["media"])
        registry.register(t)
        assert registry.get("alpha") is t
        assert registry.find_by_tag("media") == [t]
        assert registry.find_by_tag("other") == []

    def test_duplicate_name_raises(self):
        registry = TemplateRegistry()
        registry.register(make_test_template("alpha"))
        with pytest.raises(ValueError, match="Duplicate"):
            registry.register(make_test_template("alpha"))

    def test_all_sorted_by_name(self):
        registry = TemplateRegistry()
        registry.register(make_test_template("zeta"))
        registry.register(make_test_template("alpha"))
        assert [t.name for t in registry.all()] == ["alpha", "zeta"]


class TestParseSize:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1024", 1024), ("4KB", 4096), ("8MB", 8 * 1024**2), ("1 GiB", 1024**3), ("0.5MB", 524288)],
    )
    def test_valid_sizes(self, value: str, expected: int):
        assert parse_size(value) == expected

    @pytest.mark.parametrize("value", ["", "big", "4XB", "-1MB"])
    def test_invalid_sizes(self, value: str):
        with pytest.raises(ValueError):
            parse_size(value)


class TestValidateTemplate:
    def test_valid_template_has_no_errors(self):
        assert validate_template(make_test_template()) == []

    def test_escaping_paths_rejected(self):
        template = make_test_template(
            directories=["../outside", "/abs"],
            files=[TemplateFile(path=".sietch/keys/secret.key", content="x")],
        )
        errors = validate_template(template)
        assert any("escapes the vault root" in e for e in errors)
        assert any("must be relative" in e for e in errors)
        assert any("reserved .sietch" in e for e in errors)

    def test_duplicate_files_rejected(self):
        files = [TemplateFile(path="a.txt"), TemplateFile(path="a.txt")]
        errors = validate_template(make_test_template(files=files))
        assert any("declared more than once" in e for e in errors)

    def test_manifest_collision_rejected(self):
        errors = validate_template(make_test_template(files=[TemplateFile(path="vault.yaml")]))
        assert any("collides with the vault manifest" in e for e in errors)

    def test_bad_sizes_and_inverted_dedup_bounds(self):
        errors = validate_template(
            make_test_template(chunk_size="huge", dedup_min_size="64MB", dedup_max_size="1KB")
        )
        assert any("config.chunk_size" in e for e in errors)
        assert any("dedup_min_size is larger" in e for e in errors)

    def test_bad_version(self):
        template = make_test_template()
        template.version = "one"
        assert any("doesn't look like a version" in e for e in validate_template(template))

    def test_validate_file_checks_filename(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "other.yaml", PHOTO_VAULT_YAML)
        template, errors = validate_template_file(path)
        assert template is not None
        assert any("Filename should match" in e for e in errors)

    def test_validate_file_reports_load_failure(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "bad.yaml", "- just\n- a list\n")
        template, errors = validate_template_file(path)
        assert template is None
        assert "Failed to load" in errors[0]
