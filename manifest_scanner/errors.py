"""Source-located errors raised while scanning declarations."""

from tree_sitter import Node

from manifest_scanner.source_file import SourceFile
from manifest_scanner.syntax_kind import declaration_node


def location_string(source: SourceFile, node: Node) -> str:
    """Format the location of a node as ``file(line,column)``."""
    line, column = source.line_and_column(declaration_node(node).start_byte)
    return f"{source.path}({line},{column})"


class ManifestSyntaxError(Exception):
    """A declaration that cannot be turned into a manifest entry."""

    def __init__(self, message: str, file: str, line: int, column: int) -> None:
        """Store the message together with its 1-based source location."""
        super().__init__(f"{file}({line},{column}): {message}")
        self.message = message
        self.file = file
        self.line = line
        self.column = column

    @classmethod
    def at(cls, message: str, source: SourceFile, node: Node) -> "ManifestSyntaxError":
        """Build an error located at the start of ``node``."""
        line, column = source.line_and_column(declaration_node(node).start_byte)
        return cls(message, source.path, line, column)
