"""YAML template loading. Files starting with underscore are skipped."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from sietch.templates.models import TemplateFile, VaultDefaults, VaultTemplate
from sietch.templates.registry import TemplateRegistry

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_mode(value: Any, literal: str | None = None) -> str:
    # Modes are octal strings; YAML 1.1 would turn unquoted 0600 into 384 and
    # 755 into decimal 755, so integers keep the text as written.
    if isinstance(value, int) and not isinstance(value, bool):
        return literal if literal is not None else format(value, "o")
    return _as_text(value)


def _literal_modes(text: str) -> list[str | None]:
    """Source text of each ``files[i].mode`` scalar, aligned by index."""
    root = yaml.compose(text, Loader=yaml.SafeLoader)
    if not isinstance(root, yaml.MappingNode):
        return []
    modes: list[str | None] = []
    for key, value in root.value:
        if not (isinstance(key, yaml.ScalarNode) and key.value == "files"):
            continue
        modes = []
        if not isinstance(value, yaml.SequenceNode):
            continue
        for item in value.value:
            literal = None
            if isinstance(item, yaml.MappingNode):
                for field, node in item.value:
                    if (
                        isinstance(field, yaml.ScalarNode)
                        and field.value == "mode"
                        and isinstance(node, yaml.ScalarNode)
                    ):
                        literal = node.value
            modes.append(literal)
    return modes


def load_template_file(path: Path) -> VaultTemplate:
    text = Path(path).read_text(encoding="utf-8")
    raw_data = yaml.safe_load(text)
    if raw_data is None:
        raise ValueError(f"Empty template YAML: {path}")
    if not isinstance(raw_data, dict):
        raise ValueError(f"Template YAML root must be a mapping: {path}")

    data: dict[str, Any] = raw_data
    literal_modes = _literal_modes(text)
    files = [
        TemplateFile(
            path=_as_text(f.get("path")),
            content=_as_text(f.get("content")),
            mode=_as_mode(
                f.get("mode"), literal_modes[i] if i < len(literal_modes) else None
            ),
        )
        for i, f in enumerate(data.get("files") or [])
    ]

    return VaultTemplate(
        name=_as_text(data["name"]),
        description=_as_text(data.get("description")),
        version=_as_text(data["version"]),
        author=_as_text(data.get("author")),
        tags=[_as_text(t) for t in data.get("tags") or []],
        directories=[_as_text(d) for d in data.get("directories") or []],
        files=files,
        config=VaultDefaults.model_validate(data.get("config") or {}),
    )


def load_template_directory(directory: str | Path, registry: TemplateRegistry) -> int:
    """Load all YAML templates from a directory recursively. Returns count loaded."""
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Template directory does not exist: %s", directory)
        return 0

    count = 0
    for path in sorted(directory.rglob("*.yaml")):
        if path.name.startswith("_"):
            continue
        try:
            template = load_template_file(path)
            registry.register(template)
            count += 1
        except (yaml.YAMLError, KeyError, ValueError, TypeError, AttributeError) as exc:
            logger.exception("Failed to load template from %s: %s", path, exc)
    return count
