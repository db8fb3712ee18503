"""Scenario graph to narrative text.

Walks the scenario graph and writes every reachable story path exactly
once, as a sequence of *sections*:

1. Section roots are the start nodes (see
   :func:`~arkham.export.analysis.select_start_nodes`) followed by every
   merge point (indegree > 1) discovered while walking.
2. Within a section, single-successor links are followed inline. A link
   into a merge point becomes a jump marker and the merge point is queued
   as its own section; a link back into an already emitted node becomes a
   loop marker. This is what terminates cycles.
3. A node with several successors lists its options, then walks each option
   in edge order under a ``Path:`` sub-header.
4. Nodes never reached are listed in a final "disconnected" section.

The walk is a pure function of the snapshot and the formatter.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import TYPE_CHECKING

from arkham.export.analysis import compute_indegree, is_merge, select_start_nodes
from arkham.export.formatter import DEFAULT_TITLE, ExportStyle, Formatter, get_formatter
from arkham.observability.logging import get_logger
from arkham.scenario.models import BranchNode
from arkham.scenario.text import substitute_variables

if TYPE_CHECKING:
    from arkham.scenario.models import AnyNode, Edge, ScenarioSnapshot

log = get_logger(__name__)

UNKNOWN_LABEL = "Unknown"


class _ExportRun:
    """Mutable state of a single export call."""

    def __init__(self, snapshot: ScenarioSnapshot, formatter: Formatter) -> None:
        self.snapshot = snapshot
        self.formatter = formatter
        self.nodes_by_id: dict[str, AnyNode] = {node.id: node for node in snapshot.nodes}
        self.outgoing: dict[str, list[Edge]] = defaultdict(list)
        for edge in snapshot.edges:
            self.outgoing[edge.source].append(edge)
        self.indegree = compute_indegree(snapshot.nodes, snapshot.edges)

        self.lines: list[str] = []
        self.visited: set[str] = set()
        self.rendered_sections: set[str] = set()
        self.queue: deque[str] = deque()
        self.queued: set[str] = set()

    def run(self) -> str:
        self.lines.extend(self.formatter.header())

        for node in select_start_nodes(self.snapshot.nodes, self.indegree):
            self._schedule(node.id)

        while self.queue:
            root_id = self.queue.popleft()
            self.queued.discard(root_id)
            if root_id in self.rendered_sections:
                continue
            self.rendered_sections.add(root_id)
            if root_id in self.visited:
                # Flagged start already emitted inline by an earlier section
                log.debug("section_skipped", root=root_id)
                continue
            self._render_section(root_id)

        self._render_disconnected()
        return "\n".join(self.lines)

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def _schedule(self, node_id: str) -> None:
        if node_id in self.rendered_sections or node_id in self.queued:
            return
        self.queue.append(node_id)
        self.queued.add(node_id)

    def _render_section(self, root_id: str) -> None:
        root = self.nodes_by_id[root_id]
        self.lines.extend(self.formatter.section(f"Flow Starting at: {self._label(root)}"))
        start = len(self.lines)
        self._walk(root_id)
        self.lines.extend(self.formatter.section_break())
        log.debug("section_rendered", root=root_id, lines=len(self.lines) - start)

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def _walk(self, node_id: str) -> None:
        """Emit a chain starting at ``node_id``.

        Single-successor links are followed in this loop; only branch paths
        recurse, so recursion depth is bounded by branch nesting.
        """
        current: str | None = node_id
        while current is not None:
            current = self._emit(current)

    def _emit(self, node_id: str) -> str | None:
        """Emit one node and its outgoing links.

        Returns:
            The id to continue the chain with, or None if the chain ends here.
        """
        node = self.nodes_by_id[node_id]
        self.visited.add(node_id)
        self.lines.extend(self.formatter.node(node, self.snapshot.variables))

        edges = self.outgoing.get(node_id, [])
        if not edges:
            self.lines.extend(self.formatter.end_of_path())
            return None
        if len(edges) == 1:
            return self._follow(edges[0].target)

        options = [
            (self._case_label(node, edge, index), edge.target)
            for index, edge in enumerate(edges)
        ]
        for case_label, target_id in options:
            self.lines.extend(self.formatter.option(case_label, self._target_label(target_id)))
        self.lines.append("")

        for case_label, target_id in options:
            self.lines.extend(self.formatter.path(case_label, self._target_label(target_id)))
            next_id = self._follow(target_id)
            if next_id is not None:
                self._walk(next_id)
        return None

    def _follow(self, target_id: str) -> str | None:
        """Decide how a link into ``target_id`` is rendered.

        Returns:
            ``target_id`` if the chain should continue inline, else None.
        """
        target = self.nodes_by_id.get(target_id)
        if target is None:
            log.debug("dangling_edge", target=target_id)
            self.lines.extend(self.formatter.jump(UNKNOWN_LABEL))
            return None

        label = self._label(target)
        if is_merge(self.indegree, target_id):
            self.lines.extend(self.formatter.jump(label))
            self._schedule(target_id)
            return None
        if target_id in self.visited:
            self.lines.extend(self.formatter.jump(label, loop=True))
            return None
        return target_id

    # -------------------------------------------------------------------------
    # Labels
    # -------------------------------------------------------------------------

    def _label(self, node: AnyNode) -> str:
        return substitute_variables(node.data.label, self.snapshot.variables)

    def _target_label(self, target_id: str) -> str:
        target = self.nodes_by_id.get(target_id)
        return self._label(target) if target is not None else UNKNOWN_LABEL

    def _case_label(self, source: AnyNode, edge: Edge, index: int) -> str:
        """Name the option an outgoing edge represents.

        Falls back to ``Option N`` (1-based, edge order) when the source is
        not a branch or the handle matches no case.
        """
        if isinstance(source, BranchNode):
            if source.data.branch_type == "switch":
                for case in source.data.branches:
                    if case.id == edge.source_handle:
                        return substitute_variables(case.label, self.snapshot.variables)
            elif edge.source_handle == "true":
                return "True"
            elif edge.source_handle == "false":
                return "False"
        return f"Option {index + 1}"

    # -------------------------------------------------------------------------
    # Appendix
    # -------------------------------------------------------------------------

    def _render_disconnected(self) -> None:
        unvisited = [
            node
            for node in self.snapshot.nodes
            if node.id not in self.visited and node.type != "group"
        ]
        if not unvisited:
            return
        self.lines.extend(self.formatter.section(self.formatter.disconnected_title))
        for node in sorted(unvisited, key=lambda n: n.position.y):
            self.lines.extend(self.formatter.node(node, self.snapshot.variables))


def render_scenario(snapshot: ScenarioSnapshot, formatter: Formatter) -> str:
    """Export a snapshot with an explicit formatter.

    Args:
        snapshot: Scenario to export. Never modified.
        formatter: Output style.

    Returns:
        The whole export as one string.
    """
    log.debug(
        "export_started",
        style=str(formatter.style),
        nodes=len(snapshot.nodes),
        edges=len(snapshot.edges),
    )
    run = _ExportRun(snapshot, formatter)
    text = run.run()
    log.info(
        "scenario_export_complete",
        style=str(formatter.style),
        revision=snapshot.revision,
        sections=len(run.rendered_sections),
        visited=len(run.visited),
        nodes=len(snapshot.nodes),
    )
    return text


def generate_scenario_text(
    snapshot: ScenarioSnapshot,
    style: ExportStyle | str = ExportStyle.PLAIN,
    *,
    title: str = DEFAULT_TITLE,
) -> str:
    """Export a snapshot in the given style.

    Args:
        snapshot: Scenario to export.
        style: ``plain`` or ``structured`` (aliases ``text``, ``markdown``).
        title: Document title used in the header banner.

    Returns:
        The whole export as one string.

    Raises:
        ValueError: If the style is not supported.
    """
    return render_scenario(snapshot, get_formatter(style, title=title))
