"""CLI entry point: python -m sietch <command>."""

from __future__ import annotations

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="sietch",
        description="Sietch vault CLI",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    sub = parser.add_subparsers(dest="command")

    sc = sub.add_parser(
        "scaffold",
        help="Scaffold a new Sietch vault from a template",
        description=(
            "Create the directory structure, keys and manifest for a new vault. "
            "Examples: sietch scaffold --template photoVault; "
            "sietch scaffold -t photoVault -n 'My Photo Vault' -p /path/to/vault --force"
        ),
    )
    sc.add_argument("-t", "--template", default="", help="Template to use for scaffolding (required)")
    sc.add_argument("-n", "--name", default="", help="Name for the vault (optional)")
    sc.add_argument("-p", "--path", default="", help="Path where to create the vault (optional)")
    sc.add_argument("-a", "--author", default="", help="Vault author recorded in the manifest")
    sc.add_argument(
        "-f", "--force", action="store_true", default=False,
        help="Force creation even if directory exists",
    )
    sc.add_argument(
        "-l", "--list", action="store_true", default=False, help="List available templates"
    )

    tp = sub.add_parser("templates", help="Manage vault templates")
    tp.add_argument("action", choices=["list", "reset"], help="list templates or restore the defaults")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
    )

    if args.command == "scaffold":
        from sietch.cli.scaffold import run_scaffold
        sys.exit(run_scaffold(args))
    elif args.command == "templates":
        from sietch.cli.templates import run_templates
        sys.exit(run_templates(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
