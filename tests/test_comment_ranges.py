"""Tests for comment range scanning and doc comment attachment."""

from manifest_scanner.comment_ranges import (
    CommentRange,
    doc_comment_ranges,
    is_doc_comment,
    scan_comment_ranges,
)
from manifest_scanner.source_index import SourceIndex
from manifest_scanner.syntax_kind import SyntaxKind, syntax_kind


def _ranges_text(text: bytes, ranges: list[CommentRange]) -> list[str]:
    return [text[r.pos : r.end].decode() for r in ranges]


def test_leading_comments_start_after_first_line_break() -> None:
    """Verify that comments before the first line break are not leading."""
    text = b"x; // trailing\n/** leading */\nfunction f() {}"
    pos = text.index(b";") + 1
    leading = scan_comment_ranges(text, pos, trailing=False)
    assert _ranges_text(text, leading) == ["/** leading */"]


def test_trailing_comments_stop_at_line_break() -> None:
    """Verify that trailing comments are the ones on the same line."""
    text = b"x; /* a */ // b\n/** c */ y"
    pos = text.index(b";") + 1
    trailing = scan_comment_ranges(text, pos, trailing=True)
    assert _ranges_text(text, trailing) == ["/* a */", "// b"]
    assert [r.multiline for r in trailing] == [True, False]


def test_start_of_file_collects_everything() -> None:
    """Verify that every comment counts as leading at position 0."""
    text = b"/** a */ /** b */\nfunction f() {}"
    leading = scan_comment_ranges(text, 0, trailing=False)
    assert _ranges_text(text, leading) == ["/** a */", "/** b */"]


def test_shebang_is_skipped() -> None:
    """Verify that a leading #! line is not scanned as a comment."""
    text = b"#!/usr/bin/env node\n/** doc */\nfunction f() {}"
    leading = scan_comment_ranges(text, 0, trailing=False)
    assert _ranges_text(text, leading) == ["/** doc */"]


def test_scanning_stops_at_code() -> None:
    """Verify that comments after the next token are not included."""
    text = b"\n/** a */ code /** b */"
    leading = scan_comment_ranges(text, 0, trailing=False)
    assert _ranges_text(text, leading) == ["/** a */"]


def test_is_doc_comment() -> None:
    """Verify which comment forms count as doc comments."""
    text = b"/** doc */ /**/ /* plain */ //** line"
    ranges = scan_comment_ranges(text, 0, trailing=False)
    assert [is_doc_comment(text, r) for r in ranges] == [True, False, False, False]


def test_single_line_range_is_not_doc_comment() -> None:
    """Verify that a range not scanned as a block comment is never a doc comment."""
    text = b"/** doc */"
    assert is_doc_comment(text, CommentRange(0, len(text), multiline=True))
    assert not is_doc_comment(text, CommentRange(0, len(text), multiline=False))


def test_doc_comment_ranges_for_exported_declaration() -> None:
    """Verify that a doc comment before `export` belongs to the declaration."""
    index = SourceIndex()
    source = index.add_source(
        "widget.ts",
        "import x from 'x';\n\n/** @widget */\nexport default function Widget() {}\n",
    )
    export = source.root_node.named_children[-1]
    function = export.named_children[0]
    kind = syntax_kind(function)
    assert kind is SyntaxKind.FUNCTION_DECLARATION

    ranges = doc_comment_ranges(source, function, kind)
    assert _ranges_text(source.text, ranges) == ["/** @widget */"]


def test_doc_comment_ranges_ignore_previous_line_comment() -> None:
    """Verify that a doc comment trailing the previous statement is not attached."""
    index = SourceIndex()
    source = index.add_source("a.ts", "let a = 1; /** not mine */\nfunction f() {}\n")
    function = source.root_node.named_children[-1]
    ranges = doc_comment_ranges(source, function, syntax_kind(function))
    assert ranges == []
