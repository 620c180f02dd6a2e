"""Template registry -- in-memory index for loaded vault templates.

The registry maintains two lookup structures:
  - _templates: primary index by template name
  - _by_tag: secondary index mapping tags to template names

All mutations go through register(), which updates both indexes and
rejects duplicate names.
"""

from __future__ import annotations

import logging

from sietch.templates.models import VaultTemplate

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """In-memory registry of all loaded template definitions."""

    def __init__(self) -> None:
        self._templates: dict[str, VaultTemplate] = {}
        self._by_tag: dict[str, list[str]] = {}

    def register(self, template: VaultTemplate) -> None:
        """Add a template to all indexes.

        Raises ValueError if a template with the same name is already registered.
        """
        if template.name in self._templates:
            raise ValueError(f"Duplicate template name registered: {template.name!r}")
        self._templates[template.name] = template

        for tag in template.tags:
            names = self._by_tag.setdefault(tag, [])
            if template.name not in names:
                names.append(template.name)

    def get(self, name: str) -> VaultTemplate | None:
        """Look up a template by name. Returns None if not found."""
        return self._templates.get(name)

    def find_by_tag(self, tag: str) -> list[VaultTemplate]:
        """Find all templates with a given tag."""
        names = self._by_tag.get(tag, [])
        return [self._templates[n] for n in names]

    def all(self) -> list[VaultTemplate]:
        """Return all registered templates, sorted by name."""
        return [self._templates[n] for n in sorted(self._templates)]
