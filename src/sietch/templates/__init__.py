"""Template subsystem -- reusable vault layouts loaded from YAML."""

from sietch.templates.loader import load_template_directory, load_template_file
from sietch.templates.models import TemplateFile, VaultDefaults, VaultTemplate
from sietch.templates.provider import TemplateProvider
from sietch.templates.registry import TemplateRegistry
from sietch.templates.validator import (
    parse_size,
    validate_template,
    validate_template_file,
)

__all__ = [
    "TemplateFile",
    "TemplateProvider",
    "TemplateRegistry",
    "VaultDefaults",
    "VaultTemplate",
    "load_template_directory",
    "load_template_file",
    "parse_size",
    "validate_template",
    "validate_template_file",
]
