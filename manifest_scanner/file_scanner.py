"""Extraction of tagged widget and payment gateway declarations from one file."""

import logging
from dataclasses import dataclass

from tree_sitter import Node

from manifest_scanner.descriptors import ItemDescriptor, PropertyDescriptor
from manifest_scanner.errors import ManifestSyntaxError
from manifest_scanner.get_tag_value import get_tag_value
from manifest_scanner.item_kind import PAYMENT_GATEWAY, WIDGET, ItemKind
from manifest_scanner.parsed_source import Comment, ParsedSource, parse_file
from manifest_scanner.property_resolver import PropertyTypeResolver
from manifest_scanner.source_index import SourceIndex
from manifest_scanner.syntax_kind import (
    SyntaxKind,
    describe_kind,
    node_text,
    significant_children,
    syntax_kind,
)

logger = logging.getLogger(__name__)

_PARAMETER_TYPES = frozenset({"required_parameter", "optional_parameter"})


@dataclass
class FileScannerOptions:
    """Options applied to every item found in a file."""

    default_version: str | None = None


class FileScanner:
    """Finds the tagged declarations of a single file in a shared index."""

    def __init__(
        self,
        index: SourceIndex,
        file: str,
        options: FileScannerOptions | None = None,
    ) -> None:
        """Bind the scanner to one file of the index."""
        self.index = index
        self.file = file
        self.options = options or FileScannerOptions()
        self._parsed: ParsedSource | None = None
        self._parse_attempted = False

    def _parse(self) -> ParsedSource | None:
        if not self._parse_attempted:
            self._parsed = parse_file(self.index, self.file)
            self._parse_attempted = True
        return self._parsed

    def scan_for_widget(self) -> ItemDescriptor | None:
        """Return the file's widget, failing if more than one is declared."""
        parsed = self._parse()
        if parsed is None:
            return None

        declarations = [c for c in parsed.comments if WIDGET.marks(c.block)]
        if len(declarations) > 1:
            raise ManifestSyntaxError.at(
                f"Multiple @widget declarations in {self.file}, "
                "only the default export can be declared a widget",
                parsed.source_file,
                declarations[1].node,
            )
        if not declarations:
            return None

        logger.debug("found @widget declaration in %s", self.file)
        return self._process_item(WIDGET, declarations[0], parsed)

    def scan_for_payment_gateways(self) -> list[ItemDescriptor]:
        """Return every payment gateway declared in the file."""
        parsed = self._parse()
        if parsed is None:
            return []

        declarations = [c for c in parsed.comments if PAYMENT_GATEWAY.marks(c.block)]
        if declarations:
            logger.debug(
                "found %d @paymentGateway declarations in %s", len(declarations), self.file
            )
        return [self._process_item(PAYMENT_GATEWAY, d, parsed) for d in declarations]

    def _process_item(
        self, kind: ItemKind, declaration: Comment, parsed: ParsedSource
    ) -> ItemDescriptor:
        source = parsed.source_file
        node = declaration.node
        if declaration.kind is not kind.declaration_kind:
            raise ManifestSyntaxError.at(kind.wrong_kind_message, source, node)

        tags = declaration.block.tags
        name_node = node.child_by_field_name("name")
        declared_name = node_text(name_node) if name_node is not None else None

        item_id = get_tag_value(tags, kind.id_tag) or declared_name
        if not item_id:
            raise ManifestSyntaxError.at(
                f"Unable to determine {kind.label} id, no explicit id provided and "
                f"unable to determine {kind.declaration_label} name",
                source,
                node,
            )

        item = ItemDescriptor(
            id=item_id,
            name=get_tag_value(tags, kind.name_tag, full_text=True) or item_id,
            description=declaration.block.description,
            version=get_tag_value(tags, kind.version_tag) or self.options.default_version,
            source_location=self.file if kind.records_source else None,
        )

        if kind is PAYMENT_GATEWAY:
            constructor = self._constructor(node)
            if constructor is not None:
                item.properties = self._properties(kind, constructor, parsed)
        else:
            item.properties = self._properties(kind, node, parsed)

        return item

    def _properties(
        self, kind: ItemKind, function_like: Node, parsed: ParsedSource
    ) -> list[PropertyDescriptor]:
        shape = self._props_type(kind, function_like, parsed)
        if shape is None:
            return []
        return PropertyTypeResolver(parsed).resolve(shape)

    def _props_type(
        self, kind: ItemKind, function_like: Node, parsed: ParsedSource
    ) -> Node | None:
        """Return the object shape of the first parameter, if there is one.

        The shape is either written inline or refers to a type alias declared
        in the same file.
        """
        source = parsed.source_file
        params = function_like.child_by_field_name("parameters")
        first = None
        if params is not None:
            first = next(
                (p for p in significant_children(params) if p.type in _PARAMETER_TYPES),
                None,
            )
        if first is None:
            # Only an error if there is a parameter.
            return None

        annotation = first.child_by_field_name("type")
        annotated = significant_children(annotation) if annotation is not None else []
        if not annotated:
            raise ManifestSyntaxError.at(
                f"No type specified for {kind.label} props", source, first
            )

        type_node = annotated[0]
        type_kind = syntax_kind(type_node)
        if type_kind is SyntaxKind.TYPE_LITERAL:
            return type_node

        if type_kind is SyntaxKind.TYPE_REFERENCE:
            name_node = type_node
            if type_node.type == "generic_type":
                name_node = type_node.child_by_field_name("name") or type_node
            if name_node.type == "nested_type_identifier":
                raise ManifestSyntaxError.at(
                    f"Unable to determine {kind.label} props type "
                    "(qualified type references not supported)",
                    source,
                    type_node,
                )

            type_name = node_text(name_node)
            shape = parsed.types.get(type_name)
            if shape is None:
                raise ManifestSyntaxError.at(
                    f"Unable to resolve {kind.label} props type {type_name}, "
                    "only object types declared in the same file are supported",
                    source,
                    type_node,
                )
            return shape

        raise ManifestSyntaxError.at(
            f"Unable to determine {kind.label} props type from {describe_kind(type_node)}",
            source,
            type_node,
        )

    def _constructor(self, class_node: Node) -> Node | None:
        body = class_node.child_by_field_name("body")
        if body is None:
            return None
        return next(
            (m for m in body.named_children if syntax_kind(m) is SyntaxKind.CONSTRUCTOR),
            None,
        )
