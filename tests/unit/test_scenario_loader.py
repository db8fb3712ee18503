"""Tests for loading saved scenario files."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest
from pydantic import ValidationError

from arkham.scenario import (
    BranchNode,
    ElementNode,
    EventNode,
    PlainNode,
    ScenarioLoadError,
    VariableNode,
    load_scenario,
    parse_scenario,
)

if TYPE_CHECKING:
    from pathlib import Path


def _saved_scenario() -> dict[str, Any]:
    """A scenario document as the editor saves it."""
    return {
        "nodes": [
            {
                "id": "start",
                "type": "event",
                "position": {"x": 0, "y": 0},
                "data": {"label": "Arrival", "isStart": True, "revealed": False},
                "selected": True,
            },
            {
                "id": "key",
                "type": "element",
                "position": {"x": 0, "y": 100},
                "data": {
                    "label": "Brass key",
                    "infoType": "item",
                    "infoValue": "Brass key",
                    "quantity": 1,
                    "actionType": "obtain",
                },
            },
            {
                "id": "door",
                "type": "branch",
                "position": {"x": 0, "y": 200},
                "data": {
                    "label": "Locked door",
                    "branchType": "switch",
                    "conditionVariable": "keys",
                    "branches": [{"id": "c1", "label": "Open"}, {"id": "c2", "label": "Leave"}],
                },
            },
            {
                "id": "count",
                "type": "variable",
                "position": {"x": 0, "y": 300},
                "data": {"label": "Count keys", "targetVariable": "keys", "variableValue": "1"},
            },
            {
                "id": "box",
                "type": "group",
                "position": {"x": -50, "y": -50},
                "data": {"label": "Act I", "expanded": True, "contentWidth": 400},
            },
        ],
        "edges": [
            {"id": "e1", "source": "start", "target": "key", "type": "default", "data": {}},
            {"id": "e2", "source": "key", "target": "door"},
            {"id": "e3", "source": "door", "target": "count", "sourceHandle": "c1"},
            {"id": "e4", "source": "door", "target": "nowhere", "sourceHandle": "c2"},
        ],
        "gameState": {
            "currentNodes": [],
            "variables": {
                "keys": {"name": "keys", "type": "number", "value": 0},
                "mood": {"type": "string", "value": "uneasy"},
            },
        },
        "characters": [],
        "viewport": {"x": 0, "y": 0, "zoom": 1},
    }


class TestParseScenario:
    def test_builds_typed_nodes(self) -> None:
        sc = parse_scenario(_saved_scenario())

        kinds = {node.id: type(node) for node in sc.nodes}
        assert kinds == {
            "start": EventNode,
            "key": ElementNode,
            "door": BranchNode,
            "count": VariableNode,
            "box": PlainNode,
        }

    def test_reads_camel_case_fields(self) -> None:
        sc = parse_scenario(_saved_scenario())
        nodes = {node.id: node for node in sc.nodes}

        assert nodes["start"].is_start
        assert nodes["key"].data.action_type == "obtain"
        assert nodes["door"].data.branch_type == "switch"
        assert [case.label for case in nodes["door"].data.branches] == ["Open", "Leave"]
        assert nodes["count"].data.target_variable == "keys"

    def test_keeps_edge_order_and_handles(self) -> None:
        sc = parse_scenario(_saved_scenario())
        assert [e.id for e in sc.edges] == ["e1", "e2", "e3", "e4"]
        assert sc.edges[2].source_handle == "c1"

    def test_keeps_dangling_edges(self) -> None:
        sc = parse_scenario(_saved_scenario())
        assert sc.edges[3].target == "nowhere"

    def test_variable_name_defaults_to_key(self) -> None:
        sc = parse_scenario(_saved_scenario())
        assert sc.variables["mood"].name == "mood"
        assert sc.variables["keys"].value == 0

    def test_missing_sections_default_to_empty(self) -> None:
        sc = parse_scenario({})
        assert sc.nodes == ()
        assert sc.edges == ()
        assert sc.variables == {}

    def test_legacy_information_type_is_element(self) -> None:
        data = {"nodes": [{"id": "n", "type": "information", "data": {"label": "Rumour"}}]}
        node = parse_scenario(data).nodes[0]
        assert isinstance(node, ElementNode)
        assert node.type == "information"

    def test_revision_is_stamped(self) -> None:
        assert parse_scenario({}, revision=7).revision == 7

    def test_unknown_node_type_is_rejected(self) -> None:
        data = {"nodes": [{"id": "n", "type": "portal", "data": {}}]}
        with pytest.raises(ScenarioLoadError, match=r"nodes\.0"):
            parse_scenario(data)

    def test_non_object_document_is_rejected(self) -> None:
        with pytest.raises(ScenarioLoadError, match="must be a JSON object"):
            parse_scenario([1, 2, 3])

    def test_snapshot_is_frozen(self) -> None:
        sc = parse_scenario(_saved_scenario())
        with pytest.raises(ValidationError):
            sc.nodes[0].id = "other"  # type: ignore[misc]

    def test_variables_are_read_only(self) -> None:
        sc = parse_scenario(_saved_scenario())
        with pytest.raises(TypeError):
            sc.variables["mood"] = sc.variables["keys"]  # type: ignore[index]
        assert parse_scenario({}).variables == {}

    def test_quantity_saved_as_text(self) -> None:
        data = _saved_scenario()
        data["nodes"][1]["data"]["quantity"] = "3"
        node = parse_scenario(data).nodes[1]
        assert node.data.quantity == 3

    def test_cleared_quantity_is_unset(self) -> None:
        data = _saved_scenario()
        data["nodes"][1]["data"]["quantity"] = ""
        node = parse_scenario(data).nodes[1]
        assert node.data.quantity is None


class TestLoadScenario:
    def test_loads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "manor.json"
        path.write_text(json.dumps(_saved_scenario()), encoding="utf-8")

        sc = load_scenario(path)
        assert len(sc.nodes) == 5
        assert len(sc.edges) == 4

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.json"
        with pytest.raises(ScenarioLoadError) as exc_info:
            load_scenario(path)
        assert exc_info.value.path == path

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{nodes: [", encoding="utf-8")
        with pytest.raises(ScenarioLoadError, match="Invalid JSON"):
            load_scenario(path)

    def test_error_message_names_file(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ScenarioLoadError, match="list.json"):
            load_scenario(path)
