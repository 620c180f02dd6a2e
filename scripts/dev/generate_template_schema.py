"""Generate JSON Schemas for template YAML authoring and the vault manifest."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from sietch.config.models import VaultConfiguration
from sietch.templates.models import VaultTemplate


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("docs"),
        help="Directory to write template.schema.json and manifest.schema.json into.",
    )
    args = parser.parse_args()

    output_dir = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    for filename, model in (
        ("template.schema.json", VaultTemplate),
        ("manifest.schema.json", VaultConfiguration),
    ):
        path = output_dir / filename
        path.write_text(json.dumps(model.model_json_schema(), indent=2) + "\n", encoding="utf-8")
        print(f"Wrote {model.__name__} schema to {path}")


if __name__ == "__main__":
    main()
