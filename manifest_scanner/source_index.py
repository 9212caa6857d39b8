"""Shared index of parsed source files for a single scan."""

import logging
from collections.abc import Iterable
from pathlib import Path

import tree_sitter_typescript as tsts
from tree_sitter import Language, Parser

from manifest_scanner.source_file import SourceFile

logger = logging.getLogger(__name__)

TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())


def index_key(path: str | Path) -> str:
    """Normalize a file path into the key used by the index."""
    return Path(path).as_posix()


class SourceIndex:
    """Parses every scanned file once and serves read-only lookups afterwards."""

    def __init__(self, files: Iterable[str | Path] = ()) -> None:
        """Parse all of the given files up front."""
        self._ts_parser = Parser(TS_LANGUAGE)
        self._tsx_parser = Parser(TSX_LANGUAGE)
        self.files: dict[str, SourceFile] = {}
        for f in files:
            path = Path(f)
            self.add_source(path, path.read_bytes())

    def add_source(self, path: str | Path, text: str | bytes) -> SourceFile:
        """Parse ``text`` and index it under ``path``."""
        key = index_key(path)
        data = text.encode("utf-8") if isinstance(text, str) else text
        parser = self._tsx_parser if key.endswith(".tsx") else self._ts_parser
        source = SourceFile(path=key, text=data, tree=parser.parse(data))
        self.files[key] = source
        logger.debug("indexed %s (%d bytes)", key, len(data))
        return source

    def get_source_file(self, path: str | Path) -> SourceFile | None:
        """Return the indexed file, or None when it is not part of the index."""
        return self.files.get(index_key(path))
