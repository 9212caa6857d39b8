"""Generate a plugin manifest from the widgets and payment gateways in a project.

Scans the project's TypeScript sources for ``@widget`` functions and
``@paymentGateway`` classes and writes their descriptors to a JSON manifest.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from manifest_scanner.errors import ManifestSyntaxError
from manifest_scanner.load_config import load_config, scanner_options
from manifest_scanner.manifest import create_manifest, read_package_json, save_manifest
from manifest_scanner.scanner import Scanner

if TYPE_CHECKING:
    from collections.abc import Sequence

    from manifest_scanner.scanner import ScanResult

logger = logging.getLogger(__name__)

EXIT_SCAN_ERROR = 1
EXIT_NO_WIDGETS = 2
EXIT_DUPLICATE_WIDGET = 3


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the manifest generator."""
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--config", help="Path to a YAML configuration file")
    ap.add_argument(
        "--source-root",
        type=Path,
        help="Directory to scan (default: scan.source_root, 'src')",
    )
    ap.add_argument(
        "--output",
        type=Path,
        help="Manifest path (default: manifest.output, 'dist/manifest.json')",
    )
    ap.add_argument(
        "--package-json",
        type=Path,
        default=Path("package.json"),
        help="package.json providing name, description and version",
    )
    ap.add_argument(
        "--default-version",
        help="Version for items without an explicit version (default: package version)",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return ap.parse_args(argv)


def print_items(result: ScanResult) -> None:
    """Print a line for every detected item."""
    for widget in result.widgets.values():
        print(f"Detected widget {widget.id} ({widget.name})")
    for gateway in result.payment_gateways.values():
        print(f"Detected payment gateway {gateway.id} ({gateway.name})")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the scan and write the manifest."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    package = read_package_json(args.package_json)
    options = scanner_options(config, package.get("version"))
    if args.default_version:
        options.default_version = args.default_version
    source_root = args.source_root or Path(config["scan"]["source_root"])

    try:
        result = Scanner(source_root, options).scan()
    except ManifestSyntaxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SCAN_ERROR

    if not result.widgets:
        print("No widgets detected, aborting")
        return EXIT_NO_WIDGETS

    print_items(result)

    for collision in result.collisions:
        if collision.kind == "widget":
            print(
                f"Duplicate widget id {collision.id}, each widget must have a unique id!",
                file=sys.stderr,
            )
            return EXIT_DUPLICATE_WIDGET
        logger.warning(
            "Duplicate payment gateway id %s in %s replaces the one in %s",
            collision.id,
            collision.file,
            collision.previous_file,
        )

    manifest = create_manifest(
        package,
        result,
        include_payment_gateways=config["manifest"].get("include_payment_gateways", True),
    )
    out = save_manifest(manifest, args.output or config["manifest"]["output"])

    print(f"Manifest generated at {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
