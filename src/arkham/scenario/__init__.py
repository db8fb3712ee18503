"""Scenario graph models, file loading and text substitution."""

from __future__ import annotations

from arkham.scenario.errors import ScenarioLoadError
from arkham.scenario.loader import load_scenario, parse_scenario
from arkham.scenario.models import (
    AnyNode,
    BranchCase,
    BranchData,
    BranchNode,
    Edge,
    ElementData,
    ElementNode,
    EventData,
    EventNode,
    NodeData,
    PlainNode,
    Position,
    ScenarioNode,
    ScenarioSnapshot,
    Variable,
    VariableData,
    VariableNode,
)
from arkham.scenario.text import stringify_value, substitute_variables

__all__ = [
    "AnyNode",
    "BranchCase",
    "BranchData",
    "BranchNode",
    "Edge",
    "ElementData",
    "ElementNode",
    "EventData",
    "EventNode",
    "NodeData",
    "PlainNode",
    "Position",
    "ScenarioLoadError",
    "ScenarioNode",
    "ScenarioSnapshot",
    "Variable",
    "VariableData",
    "VariableNode",
    "load_scenario",
    "parse_scenario",
    "stringify_value",
    "substitute_variables",
]
