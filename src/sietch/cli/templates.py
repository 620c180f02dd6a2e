"""CLI handler for ``sietch templates`` and ``sietch scaffold --list``."""

from __future__ import annotations

import sys
from argparse import Namespace

from sietch.errors import ScaffoldError
from sietch.settings import ScaffoldSettings
from sietch.templates.provider import TemplateProvider


def list_templates(provider: TemplateProvider) -> None:
    templates = provider.list_templates()
    if not templates:
        print(f"No templates found in {provider.templates_dir}")
        return
    print("Available templates:")
    for template in templates:
        tags = f" [{', '.join(template.tags)}]" if template.tags else ""
        print(f"  {template.name} (v{template.version}){tags}")
        if template.description:
            print(f"      {template.description}")


def run_templates(args: Namespace, settings: ScaffoldSettings | None = None) -> int:
    settings = settings or ScaffoldSettings.from_env()
    provider = TemplateProvider(settings.templates_dir)
    try:
        if args.action == "reset":
            count = provider.reset_default_templates()
            print(f"Restored {count} default template(s) in {provider.templates_dir}")
        else:
            provider.initialize()
            list_templates(provider)
    except ScaffoldError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0
