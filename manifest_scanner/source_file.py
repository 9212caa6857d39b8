"""Data model for one parsed source file."""

import bisect
from dataclasses import dataclass, field

from tree_sitter import Node, Tree

from manifest_scanner.syntax_kind import is_comment


@dataclass
class SourceFile:
    """A parsed source file together with its raw text."""

    path: str
    text: bytes
    tree: Tree
    token_ends: list[int] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Record where every non-comment token ends."""
        ends: list[int] = []
        stack = [self.tree.root_node]
        while stack:
            node = stack.pop()
            if node.child_count:
                stack.extend(node.children)
            elif not is_comment(node) and node.end_byte > node.start_byte:
                ends.append(node.end_byte)
        self.token_ends = sorted(ends)

    @property
    def root_node(self) -> Node:
        """Return the root of the syntax tree."""
        return self.tree.root_node

    def full_start(self, offset: int) -> int:
        """Return the end of the last token before ``offset``, or 0."""
        i = bisect.bisect_right(self.token_ends, offset)
        return self.token_ends[i - 1] if i else 0

    def line_and_column(self, offset: int) -> tuple[int, int]:
        """Return the 1-based line and character column of a byte offset."""
        line_start = self.text.rfind(b"\n", 0, offset) + 1
        line = self.text.count(b"\n", 0, line_start) + 1
        prefix = self.text[line_start:offset].decode("utf-8", errors="replace")
        return line, len(prefix) + 1
