"""Resolution of object-shape members into property descriptors."""

import logging
import re

from tree_sitter import Node

from manifest_scanner.descriptors import PropertyDescriptor
from manifest_scanner.errors import ManifestSyntaxError, location_string
from manifest_scanner.get_tag_value import get_tag_value
from manifest_scanner.parsed_source import ParsedSource
from manifest_scanner.syntax_kind import (
    SyntaxKind,
    node_text,
    significant_children,
    syntax_kind,
)

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_TYPE = "text"

PRIMITIVE_PROPERTY_TYPES: dict[SyntaxKind, str] = {
    SyntaxKind.STRING_KEYWORD: "text",
    SyntaxKind.NUMBER_KEYWORD: "number",
    SyntaxKind.BOOLEAN_KEYWORD: "boolean",
}

_ABSENT_KINDS = frozenset({SyntaxKind.UNDEFINED_KEYWORD, SyntaxKind.NULL_KEYWORD})
# Index, call and construct signatures have no member name.
_NAMED_MEMBER_KINDS = frozenset(
    {
        SyntaxKind.PROPERTY_SIGNATURE,
        SyntaxKind.METHOD_SIGNATURE,
        SyntaxKind.GET_ACCESSOR,
        SyntaxKind.SET_ACCESSOR,
    }
)
_IDENTIFIER_NAME_TYPES = frozenset(
    {"property_identifier", "identifier", "private_property_identifier"}
)

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SINGLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_LINE_CONTINUATIONS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})


def _unescape(match: re.Match[str]) -> str:
    escape = match.group(1)
    if escape.startswith("u{"):
        return chr(int(escape[2:-1], 16))
    if escape[0] in "ux" and len(escape) > 1:
        return chr(int(escape[1:], 16))
    if escape in _LINE_CONTINUATIONS:
        return ""
    return _SINGLE_ESCAPES.get(escape, escape)


def string_literal_value(text: str) -> str:
    """Return the value of a quoted string literal with its escapes decoded."""
    return _ESCAPE_RE.sub(_unescape, text[1:-1])


def numeric_literal_name(text: str) -> str:
    """Return the canonical property name of a numeric literal, e.g. ``0x10`` -> ``16``."""
    literal = text.replace("_", "")
    if literal[:2].lower() in ("0x", "0o", "0b"):
        return str(int(literal, 0))
    value = float(literal)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def union_members(node: Node) -> list[Node]:
    """Flatten a (left-nested) union type into its alternatives."""
    members: list[Node] = []
    for child in significant_children(node):
        if syntax_kind(child) is SyntaxKind.UNION_TYPE:
            members.extend(union_members(child))
        else:
            members.append(child)
    return members


class PropertyTypeResolver:
    """Turns the members of an object shape into property descriptors."""

    def __init__(self, parsed: ParsedSource) -> None:
        """Bind the resolver to the parsed file the shapes come from."""
        self.parsed = parsed
        self.source = parsed.source_file

    def resolve(self, shape: Node) -> list[PropertyDescriptor]:
        """Return one descriptor per member, in declaration order."""
        properties: list[PropertyDescriptor] = []
        for member in significant_children(shape):
            property_id = self._member_name(member)

            comment = self.parsed.comment_for(member)
            tags = comment.block.tags if comment else []

            display_name = get_tag_value(tags, "propertyName", full_text=True) or property_id
            property_type = get_tag_value(tags, "propertyType") or self.determine_type(
                property_id, member
            )

            properties.append(
                PropertyDescriptor(
                    name=property_id,
                    display_name=display_name,
                    type=property_type,
                    optional=self.is_optional(member),
                )
            )
        return properties

    def _member_name(self, member: Node) -> str:
        name = member.child_by_field_name("name")
        if name is None or syntax_kind(member) not in _NAMED_MEMBER_KINDS:
            raise ManifestSyntaxError.at("Property has no name", self.source, member)
        if name.type in _IDENTIFIER_NAME_TYPES:
            return node_text(name)
        if name.type == "string":
            return string_literal_value(node_text(name))
        if name.type == "number":
            return numeric_literal_name(node_text(name))
        raise ManifestSyntaxError.at("Unable to determine property id", self.source, member)

    def determine_type(self, property_id: str, member: Node) -> str:
        """Classify a member's declared type, defaulting to ``text``."""
        type_node = self._base_type(member)
        kind = syntax_kind(type_node) if type_node is not None else None

        property_type = PRIMITIVE_PROPERTY_TYPES.get(kind) if kind else None
        if property_type is None:
            logger.warning(
                "%s: not able to infer type for property %s, defaulting to '%s'",
                location_string(self.source, member),
                property_id,
                DEFAULT_PROPERTY_TYPE,
            )
            return DEFAULT_PROPERTY_TYPE
        return property_type

    def is_optional(self, member: Node) -> bool:
        """Check for a ``?`` marker or an ``undefined`` union alternative."""
        if any(not child.is_named and child.type == "?" for child in member.children):
            return True

        type_node = self._declared_type(member)
        if type_node is not None and syntax_kind(type_node) is SyntaxKind.UNION_TYPE:
            return any(
                syntax_kind(t) is SyntaxKind.UNDEFINED_KEYWORD
                for t in union_members(type_node)
            )
        return False

    def _declared_type(self, member: Node) -> Node | None:
        if syntax_kind(member) is not SyntaxKind.PROPERTY_SIGNATURE:
            return None
        annotation = member.child_by_field_name("type")
        if annotation is None:
            return None
        children = significant_children(annotation)
        return children[0] if children else None

    def _base_type(self, member: Node) -> Node | None:
        """Return the declared type with ``undefined``/``null`` alternatives removed."""
        type_node = self._declared_type(member)
        if type_node is not None and syntax_kind(type_node) is SyntaxKind.UNION_TYPE:
            remaining = [
                t for t in union_members(type_node) if syntax_kind(t) not in _ABSENT_KINDS
            ]
            if len(remaining) == 1:
                return remaining[0]
            logger.debug(
                "union type of %s keeps %d alternatives", node_text(member), len(remaining)
            )
        return type_node
