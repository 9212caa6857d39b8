"""Discovery of comment ranges in the trivia around a syntax node."""

from dataclasses import dataclass

from tree_sitter import Node

from manifest_scanner.source_file import SourceFile
from manifest_scanner.syntax_kind import (
    TRAILING_COMMENT_KINDS,
    SyntaxKind,
    declaration_node,
)

_SPACES = frozenset(b" \t\v\f")
_LINE_BREAKS = frozenset(b"\r\n")
_UNICODE_SPACES = (b"\xc2\xa0", b"\xef\xbb\xbf")  # NBSP, BOM


@dataclass(frozen=True)
class CommentRange:
    """Byte range of a single comment."""

    pos: int
    end: int
    multiline: bool


def scan_comment_ranges(text: bytes, pos: int, *, trailing: bool) -> list[CommentRange]:
    """Collect the comments in the trivia that starts at ``pos``.

    Trailing comments are the ones before the first line break. Leading
    comments are the ones after it, or every comment at the start of the file.
    Scanning stops at the first character that is not trivia.
    """
    ranges: list[CommentRange] = []
    collecting = trailing or pos == 0
    if pos == 0 and text.startswith(b"#!"):
        newline = text.find(b"\n")
        pos = len(text) if newline < 0 else newline

    n = len(text)
    while pos < n:
        ch = text[pos]
        if ch in _LINE_BREAKS:
            if text.startswith(b"\r\n", pos):
                pos += 1
            pos += 1
            if trailing:
                break
            collecting = True
            continue
        if ch in _SPACES:
            pos += 1
            continue
        unicode_space = next((s for s in _UNICODE_SPACES if text.startswith(s, pos)), None)
        if unicode_space:
            pos += len(unicode_space)
            continue
        if text.startswith(b"//", pos):
            end = pos + 2
            while end < n and text[end] not in _LINE_BREAKS:
                end += 1
            if collecting:
                ranges.append(CommentRange(pos, end, multiline=False))
            pos = end
            continue
        if text.startswith(b"/*", pos):
            close = text.find(b"*/", pos + 2)
            end = n if close < 0 else close + 2
            if collecting:
                ranges.append(CommentRange(pos, end, multiline=True))
            pos = end
            continue
        break
    return ranges


def is_doc_comment(text: bytes, comment: CommentRange) -> bool:
    """Check for a ``/** */`` block comment that is not the empty ``/**/`` form."""
    start = comment.pos
    return (
        comment.multiline
        and text[start : start + 3] == b"/**"
        and text[start + 3 : start + 4] != b"/"
    )


def doc_comment_ranges(source: SourceFile, node: Node, kind: SyntaxKind) -> list[CommentRange]:
    """Return the ``/** */`` comments that document ``node``."""
    pos = source.full_start(declaration_node(node).start_byte)
    ranges: list[CommentRange] = []
    if kind in TRAILING_COMMENT_KINDS:
        ranges.extend(scan_comment_ranges(source.text, pos, trailing=True))
    ranges.extend(scan_comment_ranges(source.text, pos, trailing=False))
    return [r for r in ranges if is_doc_comment(source.text, r)]
