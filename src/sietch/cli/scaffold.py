"""CLI handler for ``sietch scaffold``."""

from __future__ import annotations

import sys
from argparse import Namespace

from sietch.cli.templates import list_templates
from sietch.errors import ScaffoldError
from sietch.pipeline import ScaffoldPipeline, ScaffoldResult
from sietch.settings import ScaffoldSettings
from sietch.telemetry import LoggerTelemetrySink
from sietch.templates.provider import TemplateProvider


def _print_summary(result: ScaffoldResult) -> None:
    template = result.template
    cfg = template.config
    print(f"Loading template: {template.name}")
    print(f"Description: {template.description}")
    print(f"Encryption key stored at: {result.key_path}")
    print()
    print(f"✅ Successfully scaffolded '{template.name}' vault at: {result.vault_path}")
    print(f"📝 Template: {template.name} (v{template.version})")
    print("🔐 Encryption: AES-256-GCM")
    print(f"📦 Chunking: {cfg.chunking_strategy} ({cfg.chunk_size} chunks)")
    if cfg.enable_dedup:
        print(f"♻️  Deduplication: Enabled ({cfg.dedup_strategy} strategy)")
    print(f"🗜️  Compression: {cfg.compression}")
    print()
    print("Your vault is ready to use! Add files with: sietch add <files>")


def run_scaffold(args: Namespace, settings: ScaffoldSettings | None = None) -> int:
    settings = settings or ScaffoldSettings.from_env()
    provider = TemplateProvider(settings.templates_dir)

    try:
        if args.list:
            provider.initialize()
            list_templates(provider)
            return 0

        if not args.template:
            print(
                "Error: template is required. Use --list to see available templates",
                file=sys.stderr,
            )
            return 1

        telemetry = LoggerTelemetrySink() if getattr(args, "verbose", False) else None
        pipeline = ScaffoldPipeline(provider, settings, telemetry_sink=telemetry)
        result = pipeline.run(
            args.template, args.name, args.path, args.force, author=args.author
        )
    except ScaffoldError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _print_summary(result)
    return 0
