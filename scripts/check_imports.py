#!/usr/bin/env python3
"""CI enforcement: cryptography imports belong in keys.py only.

Key provisioning is the single place that touches crypto primitives; the
rest of the pipeline deals in paths and configuration values.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

ALLOWED_FILES = {"keys.py"}
SRC_DIR = Path(__file__).resolve().parent.parent / "src" / "sietch"


def check() -> list[str]:
    violations: list[str] = []
    for py_file in SRC_DIR.rglob("*.py"):
        if py_file.name in ALLOWED_FILES:
            continue
        try:
            tree = ast.parse(py_file.read_text())
        except SyntaxError:
            continue
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.name.startswith("cryptography"):
                        rel = py_file.relative_to(SRC_DIR)
                        violations.append(f"{rel}:{node.lineno}: import {alias.name}")
            elif isinstance(node, ast.ImportFrom):
                if node.module and node.module.startswith("cryptography"):
                    rel = py_file.relative_to(SRC_DIR)
                    violations.append(f"{rel}:{node.lineno}: from {node.module}")
    return violations


def main() -> None:
    violations = check()
    if violations:
        print("ERROR: cryptography imports found outside keys.py:")
        for v in violations:
            print(f"  {v}")
        sys.exit(1)
    print("OK: no cryptography imports outside keys.py")


if __name__ == "__main__":
    main()
