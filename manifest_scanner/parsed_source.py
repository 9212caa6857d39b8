"""Association of doc comments with the declarations they document."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from tree_sitter import Node

from manifest_scanner.comment_ranges import doc_comment_ranges
from manifest_scanner.doc_comment import DocComment
from manifest_scanner.parse_doc_comment import parse_doc_comments
from manifest_scanner.source_file import SourceFile
from manifest_scanner.source_index import SourceIndex
from manifest_scanner.syntax_kind import (
    SyntaxKind,
    describe_kind,
    is_declaration_kind,
    node_key,
    node_text,
    syntax_kind,
)

logger = logging.getLogger(__name__)


@dataclass
class Comment:
    """A doc comment together with the declaration it documents."""

    node: Node
    kind: SyntaxKind
    block: DocComment


@dataclass
class ParsedSource:
    """Doc comments and local object-shape type aliases of one file."""

    source_file: SourceFile
    comments: list[Comment] = field(default_factory=list)
    types: dict[str, Node] = field(default_factory=dict)

    def comment_for(self, node: Node) -> Comment | None:
        """Return the first doc comment attached to exactly this node."""
        key = node_key(node)
        return next((c for c in self.comments if node_key(c.node) == key), None)


def parse_file(index: SourceIndex, file: str | Path) -> ParsedSource | None:
    """Collect the doc comments and type aliases declared in ``file``."""
    logger.debug("parsing file %s", file)

    source = index.get_source_file(file)
    if source is None:
        logger.debug("unable to get source file %s", file)
        return None

    parsed = ParsedSource(source_file=source)
    for node in _walk(source.root_node):
        kind = syntax_kind(node)
        # Only declaration forms are considered, otherwise the same comment
        # would be found again through a parent or child node.
        if not is_declaration_kind(kind):
            continue

        if kind is SyntaxKind.TYPE_ALIAS_DECLARATION:
            _index_type_alias(node, parsed.types)

        for comment_range in doc_comment_ranges(source, node, kind):
            raw = source.text[comment_range.pos : comment_range.end]
            blocks = parse_doc_comments(raw.decode("utf-8", errors="replace"))
            if blocks:
                # A single range holds a single block.
                parsed.comments.append(Comment(node=node, kind=kind, block=blocks[0]))

    return parsed


def _walk(root: Node) -> Iterator[Node]:
    """Yield the named nodes of a tree in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.named_children))


def _index_type_alias(node: Node, types: dict[str, Node]) -> None:
    """Record ``type Name = { ... }`` so parameter types can refer to it."""
    name_node = node.child_by_field_name("name")
    value = node.child_by_field_name("value")
    if name_node is None or value is None:
        return

    name = node_text(name_node)
    if syntax_kind(value) is SyntaxKind.TYPE_LITERAL:
        logger.debug("discovered type %s", name)
        types[name] = value
    else:
        logger.debug(
            "could not determine definition for type %s from %s",
            name,
            describe_kind(value),
        )
