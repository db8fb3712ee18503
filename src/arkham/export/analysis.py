"""Static graph analysis used by the scenario exporter.

Pure functions over a snapshot's nodes and edges: indegree, merge points
and the ordered set of section entry points.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from arkham.scenario.models import AnyNode, Edge, ScenarioSnapshot


def compute_indegree(nodes: Iterable[AnyNode], edges: Iterable[Edge]) -> dict[str, int]:
    """Count incoming edges per node.

    Every node starts at zero so disconnected nodes are present. Edges
    pointing at unknown ids are counted under that id as well.
    """
    indegree = {node.id: 0 for node in nodes}
    for edge in edges:
        indegree[edge.target] = indegree.get(edge.target, 0) + 1
    return indegree


def is_merge(indegree: Mapping[str, int], node_id: str) -> bool:
    """Whether a node has more than one incoming edge."""
    return indegree.get(node_id, 0) > 1


def select_start_nodes(
    nodes: Sequence[AnyNode],
    indegree: Mapping[str, int],
) -> list[AnyNode]:
    """Pick and order the roots of the top-level sections.

    A node is a root if it is an event flagged as the story start, or if
    nothing points at it. Group nodes are containers and never start a
    section. Flagged starts come first, then ascending ``position.y``;
    the sort is stable so equal positions keep authoring order.
    """
    candidates = [
        node
        for node in nodes
        if (node.type == "event" and node.is_start)
        or (indegree.get(node.id, 0) == 0 and node.type != "group")
    ]
    return sorted(candidates, key=lambda n: (not n.is_start, n.position.y))


@dataclass
class ScenarioAnalysis:
    """Summary of a scenario graph's structure."""

    indegree: dict[str, int]
    merge_points: list[str] = field(default_factory=list)
    start_nodes: list[str] = field(default_factory=list)
    dangling_edges: list[Edge] = field(default_factory=list)
    group_nodes: list[str] = field(default_factory=list)


def analyze_scenario(snapshot: ScenarioSnapshot) -> ScenarioAnalysis:
    """Compute indegree, merge points, start order and dangling edges."""
    node_ids = {node.id for node in snapshot.nodes}
    indegree = compute_indegree(snapshot.nodes, snapshot.edges)
    return ScenarioAnalysis(
        indegree=indegree,
        merge_points=[n.id for n in snapshot.nodes if is_merge(indegree, n.id)],
        start_nodes=[n.id for n in select_start_nodes(snapshot.nodes, indegree)],
        dangling_edges=[e for e in snapshot.edges if e.target not in node_ids],
        group_nodes=[n.id for n in snapshot.nodes if n.type == "group"],
    )
