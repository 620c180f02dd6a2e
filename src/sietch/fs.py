"""Filesystem materialization of the vault skeleton and template content."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sietch import constants
from sietch.errors import DirectoryCreationError, FileWriteError
from sietch.templates.models import VaultTemplate

logger = logging.getLogger(__name__)

_MAX_MODE = 0o7777


def ensure_directory(path: str | Path) -> Path:
    """Create ``path`` and its parents. Existing directories are left untouched."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationError(
            f"failed to create directory {path}: {exc}", path=path
        ) from exc
    return path


def parse_mode(mode: str, default: int = constants.DEFAULT_FILE_MODE) -> tuple[int, bool]:
    """Parse an octal permission string such as ``"0600"``.

    Returns ``(mode, parsed)``; ``parsed`` is False when ``default`` was used
    because the string was not a valid permission mode.  An empty string is
    not an error and yields the default with ``parsed=True``.
    """
    if not mode:
        return default, True
    try:
        value = int(mode, 8)
    except ValueError:
        return default, False
    if value < 0 or value > _MAX_MODE:
        return default, False
    return value, True


def write_file(path: str | Path, data: bytes, mode: int) -> Path:
    """Write ``data`` to ``path`` and set its permission bits exactly to ``mode``."""
    path = Path(path)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # os.open honours the umask; chmod pins the declared bits.
        os.chmod(path, mode)
    except OSError as exc:
        raise FileWriteError(f"failed to write file {path}: {exc}", path=path) from exc
    return path


def create_vault_structure(vault_path: str | Path) -> None:
    """Create the internal layout every vault needs, whatever its template."""
    vault_path = Path(vault_path)
    ensure_directory(vault_path)
    for relative in constants.BASE_VAULT_DIRECTORIES:
        ensure_directory(vault_path / relative)


def materialize_template(
    vault_path: str | Path,
    template: VaultTemplate,
    *,
    default_mode: int = constants.DEFAULT_FILE_MODE,
) -> None:
    """Create the base skeleton plus every directory and file the template declares."""
    vault_path = Path(vault_path)
    create_vault_structure(vault_path)

    for directory in template.directories:
        ensure_directory(vault_path / directory)
        logger.info("Created directory: %s", directory)

    for file in template.files:
        file_path = vault_path / file.path
        ensure_directory(file_path.parent)
        mode, parsed = parse_mode(file.mode, default_mode)
        if not parsed:
            logger.warning(
                "Invalid mode %r for template file %s, using %s",
                file.mode,
                file.path,
                oct(default_mode),
            )
        write_file(file_path, file.content.encode("utf-8"), mode)
        logger.info("Created file: %s", file.path)
