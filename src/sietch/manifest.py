"""Durable vault manifest: ``vault.yaml`` at the vault root."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

import yaml
from pydantic import ValidationError

from sietch import constants
from sietch.config.models import VaultConfiguration
from sietch.errors import ManifestWriteError

logger = logging.getLogger(__name__)


@runtime_checkable
class ManifestWriter(Protocol):
    """Persists a vault configuration so that it survives process exit."""

    def write(self, vault_path: str | Path, configuration: VaultConfiguration) -> Path: ...


def manifest_path(vault_path: str | Path) -> Path:
    return Path(vault_path) / constants.MANIFEST_FILE


def dump_manifest(configuration: VaultConfiguration) -> str:
    data = configuration.model_dump(mode="json", exclude_none=True)
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


class YamlManifestWriter:
    """Writes the manifest via a temp file, fsync and atomic rename."""

    def write(self, vault_path: str | Path, configuration: VaultConfiguration) -> Path:
        target = manifest_path(vault_path)
        missing = configuration.missing_fields()
        if missing:
            raise ManifestWriteError(
                f"refusing to write incomplete manifest {target}: "
                f"missing {', '.join(missing)}",
                path=target,
                missing_fields=missing,
            )

        body = dump_manifest(configuration)
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{constants.MANIFEST_FILE}.", suffix=".tmp", dir=target.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, constants.DEFAULT_FILE_MODE)
            os.replace(tmp_name, target)
            tmp_name = None
            _fsync_directory(target.parent)
        except OSError as exc:
            raise ManifestWriteError(
                f"failed to write vault manifest {target}: {exc}", path=target
            ) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info("Wrote vault manifest %s", target)
        return target


def _fsync_directory(directory: Path) -> None:
    # Directory fsync makes the rename durable; not every platform allows it.
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError:
        logger.debug("Directory fsync not supported for %s", directory)
    finally:
        os.close(fd)


def load_manifest(vault_path: str | Path) -> VaultConfiguration:
    """Read and validate ``vault.yaml``.

    Raises FileNotFoundError when the vault has no manifest and ValueError
    when the manifest does not describe a valid configuration.
    """
    path = manifest_path(vault_path)
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Vault manifest root must be a mapping: {path}")
    try:
        return VaultConfiguration.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid vault manifest {path}: {exc}") from exc
