"""Assembly and storage of the plugin manifest document."""

import json
from pathlib import Path
from typing import Any

from manifest_scanner.scanner import ScanResult


def read_package_json(path: str | Path) -> dict[str, Any]:
    """Load ``package.json``, returning an empty dict when it does not exist."""
    p = Path(path)
    if not p.exists():
        return {}
    return json.loads(p.read_text(encoding="utf-8")) or {}


def create_manifest(
    package: dict[str, Any],
    result: ScanResult,
    *,
    include_payment_gateways: bool = True,
) -> dict[str, Any]:
    """Build the manifest document for a scanned package."""
    manifest: dict[str, Any] = {
        "name": package.get("name") or "",
        "description": package.get("description") or "",
        "widgets": [w.to_dict() for w in result.widgets.values()],
    }
    if include_payment_gateways:
        manifest["paymentGateways"] = [
            g.to_dict() for g in result.payment_gateways.values()
        ]
    return manifest


def save_manifest(manifest: dict[str, Any], path: str | Path) -> Path:
    """Write the manifest as indented JSON, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(manifest, indent=2, ensure_ascii=False), encoding="utf-8")
    return out
