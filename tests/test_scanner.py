"""Tests for scanning a source tree into widget and payment gateway maps."""

from pathlib import Path

import pytest

from manifest_scanner.descriptors import ItemDescriptor, PropertyDescriptor
from manifest_scanner.errors import ManifestSyntaxError
from manifest_scanner.scanner import IdCollision, Scanner, ScannerOptions, ScanResult

FIXTURES = Path(__file__).parent / "fixtures"
TEST_FILES = FIXTURES / "testFiles"
DEFAULT_VERSION = "1-test"


@pytest.fixture(scope="module")
def result() -> ScanResult:
    """Scan the fixture tree once for the whole module."""
    return Scanner(TEST_FILES, ScannerOptions(default_version=DEFAULT_VERSION)).scan()


def _src(relative: str) -> str:
    return (TEST_FILES / relative).as_posix()


def _widget(
    item_id: str, src: str, properties: list[PropertyDescriptor] | None = None, **kwargs: str
) -> ItemDescriptor:
    return ItemDescriptor(
        id=item_id,
        name=kwargs.get("name", item_id),
        description=kwargs.get("description", ""),
        version=kwargs.get("version", DEFAULT_VERSION),
        source_location=_src(src),
        properties=properties or [],
    )


def _gateway(item_id: str, **kwargs: str) -> ItemDescriptor:
    return ItemDescriptor(
        id=item_id,
        name=kwargs.get("name", item_id),
        description=kwargs.get("description", ""),
        version=kwargs.get("version", DEFAULT_VERSION),
    )


def _text(name: str, optional: bool = False) -> PropertyDescriptor:
    return PropertyDescriptor(name=name, display_name=name, type="text", optional=optional)


def test_discover_files_is_sorted() -> None:
    """Verify that discovery returns every source file in sorted order."""
    files = Scanner(TEST_FILES).discover_files()
    assert files == sorted(files)
    assert _src("widgets/basic.tsx") in files
    assert _src("paymentGateways/basic.ts") in files
    assert not any(f.endswith(".json") for f in files)


def test_discover_files_exclude() -> None:
    """Verify that exclude patterns drop matching files."""
    files = Scanner(TEST_FILES, ScannerOptions(exclude=("*/props/*",))).discover_files()
    assert files
    assert not any("/props/" in f for f in files)


def test_detects_widgets(result: ScanResult) -> None:
    """Verify widgets marked with @widget and @widgetName."""
    assert result.widgets["Basic"] == _widget("Basic", "widgets/basic.tsx")
    assert result.widgets["Basic2"] == _widget("Basic2", "widgets/basic2.tsx")
    assert result.widgets["ExportedWidget"] == _widget(
        "ExportedWidget", "widgets/exportDefault.tsx"
    )


def test_widget_overrides(result: ScanResult) -> None:
    """Verify explicit widget id, name, description and version."""
    assert result.widgets["CustomId"] == _widget("CustomId", "widgets/widgetId.tsx")
    assert result.widgets["WidgetName"] == _widget(
        "WidgetName", "widgets/widgetName.tsx", name="Test Widget Name"
    )
    assert result.widgets["WidgetDescription"] == _widget(
        "WidgetDescription",
        "widgets/description.tsx",
        description="This is a sample description for a widget. It may wrap to multiple lines.",
    )
    assert result.widgets["WidgetVersion"] == _widget(
        "WidgetVersion", "widgets/version.tsx", version="testVersion"
    )


def test_detects_payment_gateways(result: ScanResult) -> None:
    """Verify gateways marked with @paymentGateway and @paymentGatewayName."""
    assert result.payment_gateways["BasicGateway"] == _gateway("BasicGateway")
    assert result.payment_gateways["BasicGateway2"] == _gateway("BasicGateway2")
    assert result.payment_gateways["CustomId"] == _gateway("CustomId")
    assert result.payment_gateways["PaymentGatewayName"] == _gateway(
        "PaymentGatewayName", name="Test Gateway Name"
    )
    assert result.payment_gateways["PaymentGatewayDescription"] == _gateway(
        "PaymentGatewayDescription",
        description="This is a sample description for a payment gateway. "
        "It may wrap to multiple lines.",
    )
    assert result.payment_gateways["PaymentGatewayMultiple1"] == _gateway("PaymentGatewayMultiple1")
    assert result.payment_gateways["PaymentGatewayMultiple2"] == _gateway("PaymentGatewayMultiple2")


def test_payment_gateway_properties(result: ScanResult) -> None:
    """Verify gateway properties come from the constructor's first parameter."""
    gateway = result.payment_gateways["TestGatewayProperties"]
    assert gateway.properties == [
        _text("text"),
        PropertyDescriptor(name="num", display_name="num", type="number", optional=True),
    ]
    assert gateway.source_location is None

    parameterless = result.payment_gateways["ParameterlessGateway"]
    assert parameterless == _gateway("ParameterlessGateway", version="2.0.0")


def test_payment_gateway_order(result: ScanResult) -> None:
    """Verify that gateways keep file discovery order."""
    assert list(result.payment_gateways) == [
        "BasicGateway",
        "BasicGateway2",
        "PaymentGatewayDescription",
        "CustomId",
        "PaymentGatewayName",
        "PaymentGatewayMultiple1",
        "PaymentGatewayMultiple2",
        "ParameterlessGateway",
        "TestGatewayProperties",
    ]


def test_props(result: ScanResult) -> None:
    """Verify property detection through references, literals and tag overrides."""
    text_property = [_text("textProperty")]
    assert result.widgets["PropsTypeReference"] == _widget(
        "PropsTypeReference", "props/typeReferenceProps.tsx", text_property
    )
    assert result.widgets["PropsTypeLiteral"] == _widget(
        "PropsTypeLiteral", "props/typeLiteralProps.tsx", text_property
    )
    assert result.widgets["PropertyName"].properties == [
        PropertyDescriptor(name="textProperty", display_name="Text Property", type="text")
    ]
    assert result.widgets["PropertyType"].properties == [
        PropertyDescriptor(name="choicesProperty", display_name="choicesProperty", type="choices")
    ]


def test_optional_and_inferred_props(result: ScanResult) -> None:
    """Verify optional detection and number, boolean and nullable inference."""
    assert result.widgets["OptionalProperty"].properties == [_text("textProperty", True)]
    assert result.widgets["OptionalProperty2"].properties == [_text("textProperty", True)]
    assert result.widgets["NumberProperty"].properties == [
        PropertyDescriptor(name="numProperty", display_name="numProperty", type="number")
    ]
    assert result.widgets["NullableProperty"].properties == [
        PropertyDescriptor(name="flag", display_name="flag", type="boolean"),
        PropertyDescriptor(name="count", display_name="count", type="number", optional=True),
    ]


def test_scan_counts_and_no_collisions(result: ScanResult) -> None:
    """Verify that every fixture item is found exactly once."""
    widget_count = 15
    gateway_count = 9
    assert len(result.widgets) == widget_count
    assert len(result.payment_gateways) == gateway_count
    assert result.collisions == []


def test_scan_is_repeatable(result: ScanResult) -> None:
    """Verify that a second scan yields an equal result."""
    again = Scanner(TEST_FILES, ScannerOptions(default_version=DEFAULT_VERSION)).scan()
    assert again.to_dict() == result.to_dict()


def test_colliding_ids_last_file_wins() -> None:
    """Verify that a later file replaces an item with the same id and is reported."""
    root = FIXTURES / "collisions"
    collided = Scanner(root).scan()

    assert list(collided.payment_gateways) == ["Shared"]
    assert collided.payment_gateways["Shared"].name == "Second Gateway"
    assert collided.collisions == [
        IdCollision(
            kind="paymentGateway",
            id="Shared",
            previous_file=(root / "a.ts").as_posix(),
            file=(root / "b.ts").as_posix(),
        )
    ]


def test_widget_collision_is_reported(tmp_path: Path) -> None:
    """Verify that widgets with the same id in different files collide."""
    (tmp_path / "one.tsx").write_text("/** @widget Same */\nexport default function A() {}\n")
    (tmp_path / "two.tsx").write_text("/** @widget Same */\nexport default function B() {}\n")

    collided = Scanner(tmp_path).scan()
    assert collided.widgets["Same"].source_location == (tmp_path / "two.tsx").as_posix()
    assert [(c.kind, c.id) for c in collided.collisions] == [("widget", "Same")]


def test_scan_error_aborts(tmp_path: Path) -> None:
    """Verify that a declaration error in any file fails the whole scan."""
    (tmp_path / "good.ts").write_text("/** @paymentGateway */\nexport class Good {}\n")
    (tmp_path / "bad.ts").write_text("/** @paymentGateway */\nexport function notClass() {}\n")

    with pytest.raises(ManifestSyntaxError, match="@paymentGateway must be declared on a class"):
        Scanner(tmp_path).scan()


def test_to_dict_uses_manifest_field_names(result: ScanResult) -> None:
    """Verify the serialized form of widgets and gateways."""
    data = result.to_dict()
    basic = next(w for w in data["widgets"] if w["id"] == "Basic")
    assert basic == {
        "id": "Basic",
        "name": "Basic",
        "description": "",
        "version": DEFAULT_VERSION,
        "sourceLocation": _src("widgets/basic.tsx"),
        "properties": [],
    }
    gateway = next(g for g in data["paymentGateways"] if g["id"] == "TestGatewayProperties")
    assert "sourceLocation" not in gateway
    assert gateway["properties"][1] == {
        "name": "num",
        "displayName": "num",
        "type": "number",
        "optional": True,
    }
