"""Read-only template provider backed by the user's config directory.

Templates live as YAML files in ``<config_home>/templates``.  The built-in
templates shipped with the package are copied there on first use so users
can edit them in place; ``reset_default_templates`` restores them.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import yaml
from pydantic import ValidationError

from sietch.errors import ConfigDirSetupError, TemplateInvalidError, TemplateNotFoundError
from sietch.templates.loader import load_template_directory, load_template_file
from sietch.templates.models import VaultTemplate
from sietch.templates.registry import TemplateRegistry
from sietch.templates.validator import validate_template

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES_DIR = Path(__file__).resolve().parent / "builtin"


def builtin_template_paths() -> list[Path]:
    return sorted(
        p for p in BUILTIN_TEMPLATES_DIR.glob("*.yaml") if not p.name.startswith("_")
    )


class TemplateProvider:
    """Resolves template names to validated ``VaultTemplate`` descriptors."""

    def __init__(self, templates_dir: str | Path) -> None:
        self.templates_dir = Path(templates_dir)
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def initialize(self) -> TemplateProvider:
        """Create the config directories and seed built-ins. Idempotent."""
        if not self._ready:
            self.ensure_config_directories()
            self.ensure_default_templates()
            self._ready = True
        return self

    def ensure_config_directories(self) -> None:
        try:
            self.templates_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigDirSetupError(
                f"failed to create template directory {self.templates_dir}: {exc}",
                path=self.templates_dir,
            ) from exc

    def ensure_default_templates(self) -> int:
        """Copy any missing built-in template. Returns the number copied."""
        return self._copy_builtins(overwrite=False)

    def reset_default_templates(self) -> int:
        """Overwrite the built-in templates with their pristine copies."""
        self.ensure_config_directories()
        return self._copy_builtins(overwrite=True)

    def _copy_builtins(self, *, overwrite: bool) -> int:
        copied = 0
        for source in builtin_template_paths():
            target = self.templates_dir / source.name
            if target.exists() and not overwrite:
                continue
            try:
                shutil.copyfile(source, target)
            except OSError as exc:
                raise ConfigDirSetupError(
                    f"failed to install default template {source.name}: {exc}",
                    path=target,
                ) from exc
            logger.debug("Installed default template %s", target)
            copied += 1
        return copied

    def list_templates(self) -> list[VaultTemplate]:
        registry = TemplateRegistry()
        load_template_directory(self.templates_dir, registry)
        return registry.all()

    def _find(self, name: str) -> Path | None:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            return None
        direct = self.templates_dir / f"{name}.yaml"
        if direct.is_file():
            return direct
        # Fall back to templates whose file name differs from their declared name.
        for path in sorted(self.templates_dir.glob("*.yaml")):
            if path.name.startswith("_"):
                continue
            try:
                if load_template_file(path).name == name:
                    return path
            except (yaml.YAMLError, KeyError, ValueError, TypeError, AttributeError):
                continue
        return None

    def validate(self, name: str) -> VaultTemplate:
        """Load and validate the template called ``name``.

        Raises TemplateNotFoundError or TemplateInvalidError.
        """
        path = self._find(name)
        if path is None:
            raise TemplateNotFoundError(name, path=self.templates_dir)

        try:
            template = load_template_file(path)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ]
            raise TemplateInvalidError(name, errors, path=path) from exc
        except (yaml.YAMLError, KeyError, ValueError, TypeError, AttributeError) as exc:
            raise TemplateInvalidError(name, [str(exc)], path=path) from exc

        errors = validate_template(template)
        if errors:
            raise TemplateInvalidError(name, errors, path=path)
        return template
