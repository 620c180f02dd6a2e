"""Exception taxonomy for the scaffold pipeline.

Every error carries the path (and field, where one applies) that failed so
the CLI can report a single descriptive line.  Errors raised at or after
skeleton creation are reported only after the vault has been rolled back.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffold failures."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ConfigDirSetupError(ScaffoldError):
    pass


class TemplateNotFoundError(ScaffoldError):
    def __init__(self, name: str, *, path: str | Path | None = None) -> None:
        super().__init__(
            f"template {name!r} not found. Use --list to see available templates",
            path=path,
        )
        self.name = name


class TemplateInvalidError(ScaffoldError):
    def __init__(
        self, name: str, errors: list[str], *, path: str | Path | None = None
    ) -> None:
        detail = "; ".join(errors) if errors else "unknown error"
        super().__init__(f"template {name!r} is invalid: {detail}", path=path)
        self.name = name
        self.errors = list(errors)


class PathAlreadyExistsError(ScaffoldError):
    def __init__(self, path: str | Path) -> None:
        super().__init__(
            f"{path} already exists and is not empty (use --force to overwrite)",
            path=path,
        )


class InvalidVaultNameError(ScaffoldError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"invalid vault name {name!r}: use a single directory name and --path for the location"
        )
        self.name = name


class DirectoryCreationError(ScaffoldError):
    pass


class FileWriteError(ScaffoldError):
    pass


class KeyGenerationError(ScaffoldError):
    pass


class SyncKeyGenerationError(ScaffoldError):
    pass


class ManifestWriteError(ScaffoldError):
    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        missing_fields: list[str] | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.missing_fields = list(missing_fields or [])
