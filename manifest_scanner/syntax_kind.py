"""Closed set of TypeScript syntax kinds understood by the declaration scanner.

Tree-sitter exposes node types as grammar rule names. The scanner only consumes
a small subset of the grammar, so every node is mapped onto ``SyntaxKind`` and
anything outside that subset becomes ``SyntaxKind.UNKNOWN``.
"""

import enum

from tree_sitter import Node


class SyntaxKind(enum.Enum):
    """Syntax kinds consumed by the scanner, named after their TypeScript forms."""

    # Declarations
    ARROW_FUNCTION = "ArrowFunction"
    BINDING_ELEMENT = "BindingElement"
    CLASS_DECLARATION = "ClassDeclaration"
    CLASS_EXPRESSION = "ClassExpression"
    CONSTRUCTOR = "Constructor"
    ENUM_DECLARATION = "EnumDeclaration"
    ENUM_MEMBER = "EnumMember"
    EXPORT_SPECIFIER = "ExportSpecifier"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION = "FunctionExpression"
    GET_ACCESSOR = "GetAccessor"
    IMPORT_CLAUSE = "ImportClause"
    IMPORT_EQUALS_DECLARATION = "ImportEqualsDeclaration"
    IMPORT_SPECIFIER = "ImportSpecifier"
    INTERFACE_DECLARATION = "InterfaceDeclaration"
    JSX_ATTRIBUTE = "JsxAttribute"
    METHOD_DECLARATION = "MethodDeclaration"
    METHOD_SIGNATURE = "MethodSignature"
    MODULE_DECLARATION = "ModuleDeclaration"
    NAMESPACE_IMPORT = "NamespaceImport"
    PARAMETER = "Parameter"
    PROPERTY_ASSIGNMENT = "PropertyAssignment"
    PROPERTY_DECLARATION = "PropertyDeclaration"
    PROPERTY_SIGNATURE = "PropertySignature"
    SET_ACCESSOR = "SetAccessor"
    SHORTHAND_PROPERTY_ASSIGNMENT = "ShorthandPropertyAssignment"
    TYPE_ALIAS_DECLARATION = "TypeAliasDeclaration"
    TYPE_PARAMETER = "TypeParameter"
    VARIABLE_DECLARATION = "VariableDeclaration"

    # Other members and expressions
    CALL_SIGNATURE = "CallSignature"
    CONSTRUCT_SIGNATURE = "ConstructSignature"
    INDEX_SIGNATURE = "IndexSignature"
    PARENTHESIZED_EXPRESSION = "ParenthesizedExpression"

    # Types
    ARRAY_TYPE = "ArrayType"
    FUNCTION_TYPE = "FunctionType"
    INTERSECTION_TYPE = "IntersectionType"
    LITERAL_TYPE = "LiteralType"
    PARENTHESIZED_TYPE = "ParenthesizedType"
    TUPLE_TYPE = "TupleType"
    TYPE_LITERAL = "TypeLiteral"
    TYPE_REFERENCE = "TypeReference"
    UNION_TYPE = "UnionType"

    # Keyword types
    ANY_KEYWORD = "AnyKeyword"
    BOOLEAN_KEYWORD = "BooleanKeyword"
    NEVER_KEYWORD = "NeverKeyword"
    NULL_KEYWORD = "NullKeyword"
    NUMBER_KEYWORD = "NumberKeyword"
    OBJECT_KEYWORD = "ObjectKeyword"
    STRING_KEYWORD = "StringKeyword"
    SYMBOL_KEYWORD = "SymbolKeyword"
    UNDEFINED_KEYWORD = "UndefinedKeyword"
    UNKNOWN_KEYWORD = "UnknownKeyword"
    VOID_KEYWORD = "VoidKeyword"

    UNKNOWN = "Unknown"


DECLARATION_KINDS = frozenset(
    {
        SyntaxKind.ARROW_FUNCTION,
        SyntaxKind.BINDING_ELEMENT,
        SyntaxKind.CLASS_DECLARATION,
        SyntaxKind.CLASS_EXPRESSION,
        SyntaxKind.CONSTRUCTOR,
        SyntaxKind.ENUM_DECLARATION,
        SyntaxKind.ENUM_MEMBER,
        SyntaxKind.EXPORT_SPECIFIER,
        SyntaxKind.FUNCTION_DECLARATION,
        SyntaxKind.FUNCTION_EXPRESSION,
        SyntaxKind.GET_ACCESSOR,
        SyntaxKind.IMPORT_CLAUSE,
        SyntaxKind.IMPORT_EQUALS_DECLARATION,
        SyntaxKind.IMPORT_SPECIFIER,
        SyntaxKind.INTERFACE_DECLARATION,
        SyntaxKind.JSX_ATTRIBUTE,
        SyntaxKind.METHOD_DECLARATION,
        SyntaxKind.METHOD_SIGNATURE,
        SyntaxKind.MODULE_DECLARATION,
        SyntaxKind.NAMESPACE_IMPORT,
        SyntaxKind.PARAMETER,
        SyntaxKind.PROPERTY_ASSIGNMENT,
        SyntaxKind.PROPERTY_DECLARATION,
        SyntaxKind.PROPERTY_SIGNATURE,
        SyntaxKind.SET_ACCESSOR,
        SyntaxKind.SHORTHAND_PROPERTY_ASSIGNMENT,
        SyntaxKind.TYPE_ALIAS_DECLARATION,
        SyntaxKind.TYPE_PARAMETER,
        SyntaxKind.VARIABLE_DECLARATION,
    }
)

# Kinds whose doc comment may also trail the previous token on the same line,
# e.g. ``function f(/** doc */ props: Props)``.
TRAILING_COMMENT_KINDS = frozenset(
    {
        SyntaxKind.PARAMETER,
        SyntaxKind.TYPE_PARAMETER,
        SyntaxKind.FUNCTION_EXPRESSION,
        SyntaxKind.ARROW_FUNCTION,
        SyntaxKind.PARENTHESIZED_EXPRESSION,
    }
)

_NODE_KINDS: dict[str, SyntaxKind] = {
    "abstract_class_declaration": SyntaxKind.CLASS_DECLARATION,
    "abstract_method_signature": SyntaxKind.METHOD_DECLARATION,
    "array_type": SyntaxKind.ARRAY_TYPE,
    "arrow_function": SyntaxKind.ARROW_FUNCTION,
    "call_signature": SyntaxKind.CALL_SIGNATURE,
    "class": SyntaxKind.CLASS_EXPRESSION,
    "class_declaration": SyntaxKind.CLASS_DECLARATION,
    "construct_signature": SyntaxKind.CONSTRUCT_SIGNATURE,
    "enum_assignment": SyntaxKind.ENUM_MEMBER,
    "enum_declaration": SyntaxKind.ENUM_DECLARATION,
    "export_specifier": SyntaxKind.EXPORT_SPECIFIER,
    "function": SyntaxKind.FUNCTION_EXPRESSION,
    "function_declaration": SyntaxKind.FUNCTION_DECLARATION,
    "function_expression": SyntaxKind.FUNCTION_EXPRESSION,
    "function_signature": SyntaxKind.FUNCTION_DECLARATION,
    "function_type": SyntaxKind.FUNCTION_TYPE,
    "generator_function": SyntaxKind.FUNCTION_EXPRESSION,
    "generator_function_declaration": SyntaxKind.FUNCTION_DECLARATION,
    "generic_type": SyntaxKind.TYPE_REFERENCE,
    "import_alias": SyntaxKind.IMPORT_EQUALS_DECLARATION,
    "import_clause": SyntaxKind.IMPORT_CLAUSE,
    "import_specifier": SyntaxKind.IMPORT_SPECIFIER,
    "index_signature": SyntaxKind.INDEX_SIGNATURE,
    "interface_declaration": SyntaxKind.INTERFACE_DECLARATION,
    "internal_module": SyntaxKind.MODULE_DECLARATION,
    "intersection_type": SyntaxKind.INTERSECTION_TYPE,
    "jsx_attribute": SyntaxKind.JSX_ATTRIBUTE,
    "method_definition": SyntaxKind.METHOD_DECLARATION,
    "method_signature": SyntaxKind.METHOD_SIGNATURE,
    "module": SyntaxKind.MODULE_DECLARATION,
    "namespace_import": SyntaxKind.NAMESPACE_IMPORT,
    "nested_type_identifier": SyntaxKind.TYPE_REFERENCE,
    "null": SyntaxKind.NULL_KEYWORD,
    "object_assignment_pattern": SyntaxKind.BINDING_ELEMENT,
    "object_type": SyntaxKind.TYPE_LITERAL,
    "optional_parameter": SyntaxKind.PARAMETER,
    "pair": SyntaxKind.PROPERTY_ASSIGNMENT,
    "pair_pattern": SyntaxKind.BINDING_ELEMENT,
    "parenthesized_expression": SyntaxKind.PARENTHESIZED_EXPRESSION,
    "parenthesized_type": SyntaxKind.PARENTHESIZED_TYPE,
    "property_signature": SyntaxKind.PROPERTY_SIGNATURE,
    "public_field_definition": SyntaxKind.PROPERTY_DECLARATION,
    "required_parameter": SyntaxKind.PARAMETER,
    "shorthand_property_identifier": SyntaxKind.SHORTHAND_PROPERTY_ASSIGNMENT,
    "shorthand_property_identifier_pattern": SyntaxKind.BINDING_ELEMENT,
    "tuple_type": SyntaxKind.TUPLE_TYPE,
    "type_alias_declaration": SyntaxKind.TYPE_ALIAS_DECLARATION,
    "type_identifier": SyntaxKind.TYPE_REFERENCE,
    "type_parameter": SyntaxKind.TYPE_PARAMETER,
    "undefined": SyntaxKind.UNDEFINED_KEYWORD,
    "union_type": SyntaxKind.UNION_TYPE,
    "variable_declarator": SyntaxKind.VARIABLE_DECLARATION,
}

_KEYWORD_KINDS: dict[str, SyntaxKind] = {
    "any": SyntaxKind.ANY_KEYWORD,
    "boolean": SyntaxKind.BOOLEAN_KEYWORD,
    "never": SyntaxKind.NEVER_KEYWORD,
    "number": SyntaxKind.NUMBER_KEYWORD,
    "object": SyntaxKind.OBJECT_KEYWORD,
    "string": SyntaxKind.STRING_KEYWORD,
    "symbol": SyntaxKind.SYMBOL_KEYWORD,
    "unique symbol": SyntaxKind.SYMBOL_KEYWORD,
    "unknown": SyntaxKind.UNKNOWN_KEYWORD,
    "void": SyntaxKind.VOID_KEYWORD,
}

# Nodes that carry modifiers of the declaration they wrap.
_WRAPPER_TYPES = frozenset({"export_statement", "ambient_declaration"})
_TRIVIA_TYPES = frozenset({"comment", "decorator"})


def node_key(node: Node) -> tuple[int, int, str]:
    """Return a stable identity for a node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


def node_text(node: Node) -> str:
    """Return the source text spanned by a node."""
    return (node.text or b"").decode("utf-8", errors="replace")


def is_comment(node: Node) -> bool:
    """Check if the node is a comment."""
    return node.type == "comment"


def syntax_kind(node: Node) -> SyntaxKind:
    """Map a tree-sitter node onto the scanner's closed set of syntax kinds."""
    if not node.is_named:
        return SyntaxKind.UNKNOWN

    node_type = node.type
    if node_type == "predefined_type":
        return _KEYWORD_KINDS.get(" ".join(node_text(node).split()), SyntaxKind.UNKNOWN)
    if node_type == "literal_type":
        inner = node.named_children[0] if node.named_children else None
        if inner is not None and inner.type in ("undefined", "null"):
            return _NODE_KINDS[inner.type]
        return SyntaxKind.LITERAL_TYPE
    if node_type == "type_identifier" and node_text(node) == "undefined":
        return SyntaxKind.UNDEFINED_KEYWORD
    if node_type in ("method_definition", "method_signature"):
        return _method_kind(node)
    if node_type == "property_identifier":
        parent = node.parent
        if parent is not None and parent.type == "enum_body":
            return SyntaxKind.ENUM_MEMBER
        return SyntaxKind.UNKNOWN
    if node_type in ("function", "function_expression", "class"):
        # `export default function () {}` declares a nameless function.
        parent = node.parent
        if parent is not None and parent.type == "export_statement":
            if node_type == "class":
                return SyntaxKind.CLASS_DECLARATION
            return SyntaxKind.FUNCTION_DECLARATION

    return _NODE_KINDS.get(node_type, SyntaxKind.UNKNOWN)


def _method_kind(node: Node) -> SyntaxKind:
    name = node.child_by_field_name("name")
    in_class = node.parent is not None and node.parent.type == "class_body"
    if name is not None and node_text(name) == "constructor" and (
        node.type == "method_definition" or in_class
    ):
        return SyntaxKind.CONSTRUCTOR

    for child in node.children:
        if child.is_named:
            continue
        if child.type == "get":
            return SyntaxKind.GET_ACCESSOR
        if child.type == "set":
            return SyntaxKind.SET_ACCESSOR

    if node.type == "method_signature" and not in_class:
        return SyntaxKind.METHOD_SIGNATURE
    return SyntaxKind.METHOD_DECLARATION


def is_declaration_kind(kind: SyntaxKind) -> bool:
    """Check if the kind is part of a declaration form."""
    return kind in DECLARATION_KINDS


def describe_kind(node: Node) -> str:
    """Return a readable kind name for diagnostics."""
    kind = syntax_kind(node)
    if kind is SyntaxKind.UNKNOWN:
        return node.type
    return kind.value


def significant_children(node: Node) -> list[Node]:
    """Return the named children of a node, skipping comments."""
    return [child for child in node.named_children if not is_comment(child)]


def declaration_node(node: Node) -> Node:
    """Return the outermost ``export``/``declare`` wrapper owning a declaration.

    Modifiers such as ``export default`` belong to the declaration they precede,
    so its doc comment and its reported location start at the wrapper.
    """
    current = node
    parent = current.parent
    while parent is not None and parent.type in _WRAPPER_TYPES:
        owned = next(
            (c for c in parent.named_children if c.type not in _TRIVIA_TYPES),
            None,
        )
        if owned is None or node_key(owned) != node_key(current):
            break
        current = parent
        parent = current.parent
    return current
