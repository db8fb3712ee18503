"""Tests for export output styles."""

from __future__ import annotations

import pytest

from arkham.export.formatter import (
    ExportStyle,
    MarkdownFormatter,
    PlainFormatter,
    get_formatter,
    node_fields,
)
from arkham.scenario.models import Variable
from tests.fixtures.scenario_fixtures import assign, element, event, if_else, plain, switch

VARIABLES = {"gold": Variable(name="gold", type="number", value=4)}


class TestExportStyle:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("plain", ExportStyle.PLAIN),
            ("text", ExportStyle.PLAIN),
            ("TEXT", ExportStyle.PLAIN),
            ("structured", ExportStyle.STRUCTURED),
            ("markdown", ExportStyle.STRUCTURED),
            (" md ", ExportStyle.STRUCTURED),
        ],
    )
    def test_parse_names_and_aliases(self, name: str, expected: ExportStyle) -> None:
        assert ExportStyle.parse(name) is expected

    def test_parse_unknown_lists_supported(self) -> None:
        with pytest.raises(ValueError, match="Supported: markdown, md, plain"):
            ExportStyle.parse("html")

    def test_get_formatter_by_name(self) -> None:
        assert isinstance(get_formatter("text"), PlainFormatter)
        assert isinstance(get_formatter(ExportStyle.STRUCTURED), MarkdownFormatter)

    def test_get_formatter_passes_title(self) -> None:
        assert get_formatter("plain", title="Dusk").header()[0] == "DUSK"


class TestQuantitySign:
    def test_consume_is_negative(self) -> None:
        node = element("E", quantity=3, action_type="consume")
        assert ("quantity", "-3") in node_fields(node, {})

    def test_obtain_is_positive(self) -> None:
        node = element("E", quantity=2, action_type="obtain")
        assert ("quantity", "2") in node_fields(node, {})

    def test_unset_action_is_positive(self) -> None:
        node = element("E", quantity=2)
        assert ("quantity", "2") in node_fields(node, {})

    def test_integral_float_has_no_decimal(self) -> None:
        node = element("E", quantity=3.0, action_type="consume")
        assert ("quantity", "-3") in node_fields(node, {})

    def test_missing_quantity_is_omitted(self) -> None:
        keys = [key for key, _ in node_fields(element("E", info_type="item"), {})]
        assert keys == ["info_type", "info_value"]


class TestNodeFields:
    def test_element_value_is_substituted(self) -> None:
        node = element("E", info_type="stat", info_value="HP ${gold}")
        assert node_fields(node, VARIABLES) == [("info_type", "stat"), ("info_value", "HP 4")]

    def test_if_else_condition(self) -> None:
        fields = node_fields(if_else("B", "${gold} > 3"), VARIABLES)
        assert fields == [("branch_type", "if_else"), ("condition", "4 > 3")]

    def test_switch_target_prefers_condition_value(self) -> None:
        node = switch("S", [], condition_value="weather", condition_variable="hp")
        assert node_fields(node, {}) == [("branch_type", "switch"), ("target", "weather")]

    def test_switch_target_falls_back_to_variable(self) -> None:
        node = switch("S", [], condition_variable="hp")
        assert node_fields(node, {}) == [("branch_type", "switch"), ("target", "hp")]

    def test_variable_assignment(self) -> None:
        fields = node_fields(assign("V", "gold", "${gold} + 1"), VARIABLES)
        assert fields == [("assignment", "gold = 4 + 1")]

    @pytest.mark.parametrize("node_type", ["memo", "jump", "sticky", "character", "resource"])
    def test_plain_types_have_no_fields(self, node_type: str) -> None:
        assert node_fields(plain("X", node_type), {}) == []

    def test_event_has_no_fields(self) -> None:
        assert node_fields(event("A", start=True), {}) == []


class TestPlainFormatter:
    def test_node_block(self) -> None:
        lines = PlainFormatter().node(if_else("Check", "gold > 3"), {})
        assert lines == [
            "-" * 40,
            "Node: Check [branch]",
            "Branch Type: if_else",
            "Condition: gold > 3",
            "",
        ]

    def test_description_line(self) -> None:
        lines = PlainFormatter().node(event("A", description="You have ${gold} coins."), VARIABLES)
        assert "Description: You have 4 coins." in lines

    def test_empty_description_omitted(self) -> None:
        lines = PlainFormatter().node(event("A", description=""), {})
        assert not any(line.startswith("Description") for line in lines)

    def test_variable_node_label(self) -> None:
        lines = PlainFormatter().node(assign("V", "gold", "10"), {})
        assert "Set Variable: gold = 10" in lines

    def test_markers(self) -> None:
        fmt = PlainFormatter()
        assert fmt.jump("Cellar") == ["-> Jump to: Cellar", ""]
        assert fmt.jump("Cellar", loop=True) == ["-> Jump to: Cellar (Loop)", ""]
        assert fmt.end_of_path() == ["(End of path)", ""]
        assert fmt.section("Intro") == ["[Intro]"]


class TestMarkdownFormatter:
    def test_node_block(self) -> None:
        node = switch("Weather", [], condition_variable="weather")
        lines = MarkdownFormatter().node(node, {})
        assert lines == [
            "### Weather (branch)",
            "- **Type:** switch",
            "- **Target:** weather",
            "",
        ]

    def test_variable_node_label(self) -> None:
        lines = MarkdownFormatter().node(assign("V", "gold", "10"), {})
        assert "- **Set:** gold = 10" in lines

    def test_element_quantity_line(self) -> None:
        node = element("Potion", info_type="item", info_value="Potion", quantity=1, action_type="consume")
        lines = MarkdownFormatter().node(node, {})
        assert "- **Quantity:** -1" in lines

    def test_markers(self) -> None:
        fmt = MarkdownFormatter()
        assert fmt.jump("Cellar") == ["> **Jump to:** Cellar", ""]
        assert fmt.jump("Cellar", loop=True) == ["> **Jump to:** Cellar (Loop)", ""]
        assert fmt.end_of_path() == ["> *(End of path)*", ""]
        assert fmt.path("True", "Cellar") == ["#### Path: True (-> Cellar)"]
        assert fmt.section_break() == ["", "---", ""]
