"""Template validator -- ensures template definitions are usable for scaffolding.

Validation checks:
  - Required fields present and non-empty
  - Version string looks like a version number
  - Declared directories and files are relative and stay inside the vault
  - No file path is declared twice
  - Chunk and dedup sizes parse, and the dedup minimum does not exceed the maximum
  - Dedup GC threshold and RSA key size are positive
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

from sietch import constants
from sietch.templates.loader import load_template_file
from sietch.templates.models import VaultTemplate

REQUIRED_FIELDS = ["name", "version"]

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGT]?I?B?)\s*$", re.IGNORECASE)
_SIZE_UNITS = {"": 1, "K": 1024, "M": 1024**2, "G": 1024**3, "T": 1024**4}


def parse_size(value: str) -> int:
    """Convert a human size ("4MB", "512 KiB", "1024") to bytes.

    Raises ValueError if the string is not a size.
    """
    match = _SIZE_RE.match(value or "")
    if not match:
        raise ValueError(f"invalid size {value!r}")
    number, unit = match.groups()
    prefix = unit.upper().rstrip("B").rstrip("I")
    if prefix not in _SIZE_UNITS:
        raise ValueError(f"invalid size unit in {value!r}")
    return int(float(number) * _SIZE_UNITS[prefix])


def _path_error(kind: str, value: str) -> str | None:
    path = PurePosixPath(value)
    if not value or value == ".":
        return f"{kind} path is empty"
    if path.is_absolute():
        return f"{kind} path '{value}' must be relative"
    if ".." in path.parts:
        return f"{kind} path '{value}' escapes the vault root"
    if path.parts[0] == constants.VAULT_META_DIR:
        return f"{kind} path '{value}' is inside the reserved {constants.VAULT_META_DIR} directory"
    return None


def validate_template(template: VaultTemplate) -> list[str]:
    """Return a list of human-readable problems with ``template``."""
    errors: list[str] = []

    for field_name in REQUIRED_FIELDS:
        if not getattr(template, field_name, None):
            errors.append(f"Missing or empty required field '{field_name}'")

    if template.version and not all(c.isdigit() or c == "." for c in template.version):
        errors.append(
            f"Version '{template.version}' doesn't look like a version number"
        )

    for directory in template.directories:
        problem = _path_error("Directory", directory)
        if problem:
            errors.append(problem)

    seen: set[str] = set()
    for file in template.files:
        problem = _path_error("File", file.path)
        if problem:
            errors.append(problem)
        if file.path in seen:
            errors.append(f"File path '{file.path}' is declared more than once")
        seen.add(file.path)
        if file.path == constants.MANIFEST_FILE:
            errors.append(f"File path '{file.path}' collides with the vault manifest")

    cfg = template.config
    sizes: dict[str, int] = {}
    for field_name in ("chunk_size", "dedup_min_size", "dedup_max_size"):
        try:
            sizes[field_name] = parse_size(getattr(cfg, field_name))
        except ValueError as exc:
            errors.append(f"config.{field_name}: {exc}")
    if (
        "dedup_min_size" in sizes
        and "dedup_max_size" in sizes
        and sizes["dedup_min_size"] > sizes["dedup_max_size"]
    ):
        errors.append("config.dedup_min_size is larger than config.dedup_max_size")

    if cfg.dedup_gc_threshold <= 0:
        errors.append("config.dedup_gc_threshold must be positive")
    if cfg.rsa_key_size is not None and cfg.rsa_key_size < 1024:
        errors.append("config.rsa_key_size must be at least 1024")

    return errors


def validate_template_file(path: Path) -> tuple[VaultTemplate | None, list[str]]:
    """Validate a single template YAML file.

    Returns a tuple of (template_or_none, list_of_errors).
    """
    try:
        template = load_template_file(path)
    except Exception as exc:
        return None, [f"{path.name}: Failed to load -- {exc}"]

    errors = [f"{path.name}: {err}" for err in validate_template(template)]

    if path.stem != template.name:
        errors.append(
            f"{path.name}: Filename should match template name "
            f"'{template.name}' (expected '{template.name}.yaml')"
        )
    return template, errors
