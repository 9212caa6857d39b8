"""The kinds of tagged declarations the scanner turns into manifest items."""

from dataclasses import dataclass

from manifest_scanner.doc_comment import DocComment
from manifest_scanner.syntax_kind import SyntaxKind


@dataclass(frozen=True)
class ItemKind:
    """Tag names and syntactic rules for one kind of manifest item."""

    label: str
    id_tag: str
    name_tag: str
    version_tag: str
    declaration_kind: SyntaxKind
    declaration_label: str
    wrong_kind_message: str
    records_source: bool = False

    def marks(self, comment: DocComment) -> bool:
        """Check if a doc comment declares an item of this kind."""
        return comment.has_tag(self.id_tag, self.name_tag)


WIDGET = ItemKind(
    label="widget",
    id_tag="widget",
    name_tag="widgetName",
    version_tag="widgetVersion",
    declaration_kind=SyntaxKind.FUNCTION_DECLARATION,
    declaration_label="function",
    wrong_kind_message="@widget must be declared on a FunctionComponent",
    records_source=True,
)

PAYMENT_GATEWAY = ItemKind(
    label="payment gateway",
    id_tag="paymentGateway",
    name_tag="paymentGatewayName",
    version_tag="paymentGatewayVersion",
    declaration_kind=SyntaxKind.CLASS_DECLARATION,
    declaration_label="class",
    wrong_kind_message="@paymentGateway must be declared on a class",
)
