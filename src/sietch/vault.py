"""Vault path resolution and best-effort rollback of failed scaffolds."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path

from sietch.errors import FileWriteError, InvalidVaultNameError, PathAlreadyExistsError

logger = logging.getLogger(__name__)


def prepare_vault_path(base_path: str | Path, vault_name: str, force: bool) -> Path:
    """Return the absolute vault path, refusing to reuse a non-empty one.

    ``base_path`` defaults to the current working directory.  An existing
    empty directory is reused; a non-empty one (or a plain file) raises
    PathAlreadyExistsError unless ``force`` is set.  ``vault_name`` must be a
    single relative path component.  No filesystem changes.
    """
    if (
        not vault_name.strip()
        or "/" in vault_name
        or "\\" in vault_name
        or vault_name in (".", "..")
    ):
        raise InvalidVaultNameError(vault_name)

    base = Path(base_path) if str(base_path) else Path.cwd()
    vault_path = (base.expanduser() / vault_name).absolute()

    if vault_path.exists() and not force:
        if not vault_path.is_dir() or any(vault_path.iterdir()):
            raise PathAlreadyExistsError(vault_path)
    return vault_path


def cleanup_on_error(vault_path: str | Path) -> bool:
    """Recursively remove a partially created vault.

    Best-effort: a failed removal is logged, never raised, so the error that
    triggered the rollback stays the one reported.  Returns True when the
    path no longer exists afterwards.
    """
    vault_path = Path(vault_path)
    if not os.path.lexists(vault_path):
        return True
    try:
        if vault_path.is_dir() and not vault_path.is_symlink():
            shutil.rmtree(vault_path)
        else:
            vault_path.unlink()
    except OSError as exc:
        logger.warning("Failed to clean up partial vault at %s: %s", vault_path, exc)
        return False
    return True


def _snapshot(root: Path) -> set[Path]:
    entries: set[Path] = set()
    for dirpath, dirnames, filenames in os.walk(root):
        for name in (*dirnames, *filenames):
            entries.add(Path(dirpath) / name)
    return entries


class RollbackController:
    """Undoes a failed scaffold.

    A vault created from nothing is removed entirely.  When ``--force``
    reuses an existing directory, entries that did not exist before the run
    are removed and the ``protected`` files the run may overwrite (keys,
    manifest, template files) are backed up first and restored byte for byte.
    Call ``discard`` once the scaffold succeeds.
    """

    def __init__(self, vault_path: str | Path, protected: Iterable[str | Path] = ()) -> None:
        self.vault_path = Path(vault_path)
        self._preexisting: set[Path] | None = None
        self._backup_dir: Path | None = None
        self._backups: dict[Path, Path] = {}
        if self.vault_path.is_dir():
            self._preexisting = _snapshot(self.vault_path)
            self._back_up(protected)

    @property
    def reuses_existing(self) -> bool:
        return self._preexisting is not None

    def _back_up(self, protected: Iterable[str | Path]) -> None:
        for relative in protected:
            source = self.vault_path / relative
            if source in self._backups or source.is_symlink() or not source.is_file():
                continue
            try:
                if self._backup_dir is None:
                    self._backup_dir = Path(tempfile.mkdtemp(prefix="sietch-rollback-"))
                target = self._backup_dir / str(len(self._backups))
                shutil.copy2(source, target)
            except OSError as exc:
                self.discard()
                raise FileWriteError(
                    f"failed to back up {source} before overwriting it: {exc}", path=source
                ) from exc
            self._backups[source] = target

    def discard(self) -> None:
        """Drop the backups taken for a forced re-scaffold."""
        if self._backup_dir is not None:
            cleanup_on_error(self._backup_dir)
        self._backup_dir = None
        self._backups = {}

    def rollback(self) -> bool:
        if self._preexisting is None:
            return cleanup_on_error(self.vault_path)
        if not self.vault_path.is_dir():
            self.discard()
            return True

        created = _snapshot(self.vault_path) - self._preexisting
        ok = True
        for path in sorted(created, key=lambda p: len(p.parts)):
            # Removing the topmost new directory takes its children with it.
            if any(parent in created for parent in path.parents):
                continue
            ok = cleanup_on_error(path) and ok

        for original, backup in self._backups.items():
            try:
                original.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(backup, original)
            except OSError as exc:
                logger.warning("Failed to restore %s from backup: %s", original, exc)
                ok = False
        if ok:
            self.discard()
        elif self._backup_dir is not None:
            logger.warning("Kept rollback backups in %s", self._backup_dir)
        return ok
