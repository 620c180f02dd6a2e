"""Tests for the sietch command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from sietch.__main__ import main
from sietch.settings import ScaffoldSettings


@pytest.fixture(autouse=True)
def _fast_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setattr(
        ScaffoldSettings,
        "from_env",
        classmethod(lambda cls: cls(
            config_home=tmp_path / "config-home", scrypt_n=2**10, rsa_key_size=2048
        )),
    )


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as info:
        main(argv)
    return info.value.code


class TestScaffoldCommand:
    def test_success_prints_summary(self, workdir: Path, capsys):
        assert _run(["scaffold", "--template", "photoVault"]) == 0
        out = capsys.readouterr().out
        assert "Successfully scaffolded 'photoVault'" in out
        assert "Encryption: AES-256-GCM" in out
        assert "Deduplication: Enabled" in out
        assert (workdir / "photoVault" / "vault.yaml").is_file()

    def test_short_flags(self, workdir: Path, tmp_path: Path):
        target = tmp_path / "vaults"
        assert _run(["scaffold", "-t", "backupVault", "-n", "nightly", "-p", str(target)]) == 0
        assert (target / "nightly" / "snapshots").is_dir()

    def test_template_required(self, workdir: Path, capsys):
        assert _run(["scaffold"]) == 1
        assert "template is required" in capsys.readouterr().err

    def test_error_is_single_line_and_nonzero(self, workdir: Path, capsys):
        (workdir / "photoVault").mkdir()
        (workdir / "photoVault" / "x").write_text("x")
        assert _run(["scaffold", "-t", "photoVault"]) == 1
        captured = capsys.readouterr()
        assert captured.err.startswith("Error: ")
        assert captured.err.count("\n") == 1
        assert "Successfully" not in captured.out

    def test_path_as_vault_name_rejected(self, workdir: Path, tmp_path: Path, capsys):
        target = tmp_path / "elsewhere"
        assert _run(["scaffold", "-t", "photoVault", "-n", str(target)]) == 1
        assert "invalid vault name" in capsys.readouterr().err
        assert not target.exists()
        assert list(workdir.iterdir()) == []

    def test_list(self, workdir: Path, capsys):
        assert _run(["scaffold", "--list"]) == 0
        out = capsys.readouterr().out
        assert "photoVault (v1.0.0)" in out
        assert "documentVault" in out


class TestTemplatesCommand:
    def test_list(self, capsys):
        assert _run(["templates", "list"]) == 0
        assert "backupVault" in capsys.readouterr().out

    def test_reset(self, tmp_path: Path, capsys):
        assert _run(["templates", "reset"]) == 0
        assert "Restored 3 default template(s)" in capsys.readouterr().out
        assert (tmp_path / "config-home" / "templates" / "photoVault.yaml").is_file()


def test_no_command_prints_help(capsys):
    assert _run([]) == 1
    assert "usage: sietch" in capsys.readouterr().out
