"""Scanning of a source tree for widgets and payment gateways."""

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from manifest_scanner.descriptors import ItemDescriptor
from manifest_scanner.file_scanner import FileScanner, FileScannerOptions
from manifest_scanner.source_index import SourceIndex

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("**/*.ts", "**/*.tsx")


@dataclass
class ScannerOptions(FileScannerOptions):
    """Options controlling file discovery and item defaults."""

    patterns: tuple[str, ...] = DEFAULT_PATTERNS
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True)
class IdCollision:
    """An item that replaced an earlier item with the same id."""

    kind: str
    id: str
    previous_file: str
    file: str


@dataclass
class ScanResult:
    """Widgets and payment gateways keyed by id."""

    widgets: dict[str, ItemDescriptor] = field(default_factory=dict)
    payment_gateways: dict[str, ItemDescriptor] = field(default_factory=dict)
    collisions: list[IdCollision] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize both item maps as lists in discovery order."""
        return {
            "widgets": [w.to_dict() for w in self.widgets.values()],
            "paymentGateways": [g.to_dict() for g in self.payment_gateways.values()],
        }


class Scanner:
    """Scans every TypeScript file below a source root."""

    def __init__(self, source_root: str | Path, options: ScannerOptions | None = None) -> None:
        """Initialize the scanner with a source root and options."""
        self.source_root = Path(source_root)
        self.options = options or ScannerOptions()

    def discover_files(self) -> list[str]:
        """Return the matching source files in a fixed, sorted order."""
        found: set[Path] = set()
        for pattern in self.options.patterns:
            for path in self.source_root.glob(pattern):
                if path.is_file() and not self._is_excluded(path):
                    found.add(path)
        files = [p.as_posix() for p in sorted(found)]
        logger.debug("discovered %d source files under %s", len(files), self.source_root)
        return files

    def _is_excluded(self, path: Path) -> bool:
        posix = path.as_posix()
        return any(fnmatch.fnmatch(posix, pattern) for pattern in self.options.exclude)

    def scan(self) -> ScanResult:
        """Scan all files; any declaration error aborts the whole scan."""
        files = self.discover_files()
        index = SourceIndex(files)

        widgets: list[tuple[str, ItemDescriptor]] = []
        payment_gateways: list[tuple[str, ItemDescriptor]] = []

        for file in files:
            file_scanner = FileScanner(index, file, self.options)
            widget = file_scanner.scan_for_widget()
            if widget:
                widgets.append((file, widget))
            payment_gateways.extend(
                (file, gateway) for gateway in file_scanner.scan_for_payment_gateways()
            )

        result = ScanResult()
        result.widgets = _key_by_id("widget", widgets, result.collisions)
        result.payment_gateways = _key_by_id(
            "paymentGateway", payment_gateways, result.collisions
        )
        return result


def _key_by_id(
    kind: str,
    items: list[tuple[str, ItemDescriptor]],
    collisions: list[IdCollision],
) -> dict[str, ItemDescriptor]:
    """Key items by id; a later item replaces an earlier one with the same id."""
    keyed: dict[str, ItemDescriptor] = {}
    origin: dict[str, str] = {}
    for file, item in items:
        if item.id in keyed:
            logger.debug("%s %s from %s replaces %s", kind, item.id, file, origin[item.id])
            collisions.append(IdCollision(kind, item.id, origin[item.id], file))
        keyed[item.id] = item
        origin[item.id] = file
    return keyed
