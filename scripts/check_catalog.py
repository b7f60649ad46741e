#!/usr/bin/env python
"""
Catalog authoring check.

Builds the navigation catalog from an account-status package (JSON file with
Functions_Details / Modules_Details / Account_Settings) and reports module URLs
that overlap. Overlapping URLs make URL resolution depend on catalog order.

Usage:
    python scripts/check_catalog.py package.json
    python scripts/check_catalog.py package.json --strict
    python scripts/check_catalog.py package.json --print-tree
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.portal.catalog import CatalogConfigError, build_catalog, find_url_overlaps, validate_catalog  # noqa: E402
from app.portal.records import snapshot_from_store  # noqa: E402


def print_tree(catalog) -> None:
    for function in catalog:
        print(f"{function.default_order:>4}  {function.code}  {function.name}")
        for module in function.modules:
            marker = " " if module.is_implemented else "-"
            print(f"      {marker} {module.default_order:>4}  {module.code}  {module.name}  /{module.url.strip().strip('/')}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check a navigation catalog package for overlapping module URLs.")
    parser.add_argument("package", type=Path, help="Path to the account-status JSON package")
    parser.add_argument("--strict", action="store_true", help="Exit non-zero when overlaps are found")
    parser.add_argument("--print-tree", action="store_true", help="Print the built catalog")
    args = parser.parse_args(argv)

    try:
        package = json.loads(args.package.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: cannot read package {args.package}: {e}", file=sys.stderr)
        return 2
    if not isinstance(package, dict):
        print("ERROR: package must be a JSON object", file=sys.stderr)
        return 2

    catalog = build_catalog(snapshot_from_store(package))
    if args.print_tree:
        print_tree(catalog)

    if args.strict:
        try:
            validate_catalog(catalog, "strict")
        except CatalogConfigError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        print(f"OK: {len(catalog)} functions, no overlapping module URLs")
        return 0

    overlaps = find_url_overlaps(catalog)
    for a, b in overlaps:
        print(f"OVERLAP: {a.code} ({a.url}) ~ {b.code} ({b.url})")
    print(f"{len(catalog)} functions, {len(overlaps)} overlapping pair(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
