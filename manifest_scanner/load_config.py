"""Logic for loading and merging scanner configuration files."""

import copy
from pathlib import Path
from typing import Any

import yaml

from manifest_scanner.deep_merge import deep_merge
from manifest_scanner.scanner import DEFAULT_PATTERNS, ScannerOptions

DEFAULT_CONFIG: dict[str, Any] = {
    "scan": {
        "source_root": "src",
        "patterns": list(DEFAULT_PATTERNS),
        "exclude": [],
        "default_version": None,
    },
    "manifest": {
        "output": "dist/manifest.json",
        "include_payment_gateways": True,
    },
}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
    return config


def scanner_options(config: dict[str, Any], default_version: str | None = None) -> ScannerOptions:
    """Build scanner options from the ``scan`` section of a configuration."""
    scan = config.get("scan", {})
    return ScannerOptions(
        default_version=scan.get("default_version") or default_version,
        patterns=tuple(scan.get("patterns") or DEFAULT_PATTERNS),
        exclude=tuple(scan.get("exclude") or ()),
    )
