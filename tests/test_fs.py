"""Tests for vault skeleton and template materialization."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

import pytest
from conftest import make_test_template

from sietch import constants
from sietch.errors import DirectoryCreationError, FileWriteError
from sietch.fs import (
    create_vault_structure,
    ensure_directory,
    materialize_template,
    parse_mode,
    write_file,
)
from sietch.templates.loader import load_template_file
from sietch.templates.models import TemplateFile


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


class TestEnsureDirectory:
    def test_existing_directory_is_untouched(self, tmp_path: Path):
        target = tmp_path / "a"
        target.mkdir()
        (target / "keep.txt").write_text("data")
        ensure_directory(target)
        ensure_directory(target)
        assert (target / "keep.txt").read_text() == "data"

    def test_creates_parents(self, tmp_path: Path):
        assert ensure_directory(tmp_path / "x" / "y" / "z").is_dir()

    def test_file_in_the_way_raises(self, tmp_path: Path):
        (tmp_path / "f").write_text("")
        with pytest.raises(DirectoryCreationError) as info:
            ensure_directory(tmp_path / "f" / "sub")
        assert info.value.path == tmp_path / "f" / "sub"


class TestParseMode:
    @pytest.mark.parametrize(
        ("raw", "expected"), [("0600", 0o600), ("755", 0o755), ("0", 0), ("", 0o644)]
    )
    def test_valid(self, raw: str, expected: int):
        assert parse_mode(raw) == (expected, True)

    @pytest.mark.parametrize("raw", ["rw-r--r--", "0999", "abc", "77777"])
    def test_invalid_falls_back(self, raw: str):
        assert parse_mode(raw, 0o640) == (0o640, False)


class TestWriteFile:
    def test_sets_exact_mode(self, tmp_path: Path):
        path = write_file(tmp_path / "secret", b"abc", 0o600)
        assert path.read_bytes() == b"abc"
        assert _mode(path) == 0o600

    def test_overwrites(self, tmp_path: Path):
        write_file(tmp_path / "f", b"long content", 0o644)
        write_file(tmp_path / "f", b"short", 0o644)
        assert (tmp_path / "f").read_bytes() == b"short"

    def test_failure_propagates(self, tmp_path: Path):
        with pytest.raises(FileWriteError):
            write_file(tmp_path / "missing-dir" / "f", b"x", 0o644)


class TestMaterialize:
    def test_base_structure(self, tmp_path: Path):
        create_vault_structure(tmp_path / "v")
        for relative in constants.BASE_VAULT_DIRECTORIES:
            assert (tmp_path / "v" / relative).is_dir()

    def test_template_directories_and_files(self, tmp_path: Path):
        template = make_test_template(
            directories=["photos", "thumbnails/small"],
            files=[
                TemplateFile(path="config/defaults.yaml", content="a: 1\n", mode="0600"),
                TemplateFile(path="README.md", content="# hi\n"),
            ],
        )
        vault = tmp_path / "v"
        materialize_template(vault, template)

        assert (vault / "photos").is_dir()
        assert (vault / "thumbnails" / "small").is_dir()
        assert (vault / "config" / "defaults.yaml").read_text() == "a: 1\n"
        assert _mode(vault / "config" / "defaults.yaml") == 0o600
        assert _mode(vault / "README.md") == constants.DEFAULT_FILE_MODE

    def test_unparsable_mode_still_writes_with_warning(self, tmp_path: Path, caplog):
        template = make_test_template(
            files=[TemplateFile(path="odd.txt", content="still here", mode="rwx")]
        )
        with caplog.at_level(logging.WARNING, logger="sietch.fs"):
            materialize_template(tmp_path / "v", template, default_mode=0o640)
        written = tmp_path / "v" / "odd.txt"
        assert written.read_text() == "still here"
        assert _mode(written) == 0o640
        assert "Invalid mode 'rwx'" in caplog.text

    def test_unquoted_yaml_mode_applied_as_octal(self, tmp_path: Path):
        source = tmp_path / "exec.yaml"
        source.write_text(
            "name: exec\nversion: \"1.0\"\nfiles:\n"
            "  - path: run.sh\n    content: echo hi\n    mode: 755\n"
            "  - path: secret.txt\n    mode: 0600\n",
            encoding="utf-8",
        )
        vault = tmp_path / "v"
        materialize_template(vault, load_template_file(source))
        assert _mode(vault / "run.sh") == 0o755
        assert _mode(vault / "secret.txt") == 0o600

    def test_rerun_is_idempotent_for_directories(self, tmp_path: Path):
        template = make_test_template(directories=["photos"])
        vault = tmp_path / "v"
        materialize_template(vault, template)
        (vault / "photos" / "img.jpg").write_bytes(b"\xff\xd8")
        materialize_template(vault, template)
        assert (vault / "photos" / "img.jpg").read_bytes() == b"\xff\xd8"
