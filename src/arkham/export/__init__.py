"""Scenario export: graph analysis, traversal and output styles."""

from __future__ import annotations

from arkham.export.analysis import (
    ScenarioAnalysis,
    analyze_scenario,
    compute_indegree,
    is_merge,
    select_start_nodes,
)
from arkham.export.engine import generate_scenario_text, render_scenario
from arkham.export.formatter import (
    DEFAULT_TITLE,
    ExportStyle,
    Formatter,
    MarkdownFormatter,
    PlainFormatter,
    get_formatter,
)
from arkham.export.text_exporter import ScenarioExporter


def get_exporter(style_name: str, *, title: str = DEFAULT_TITLE) -> ScenarioExporter:
    """Get an exporter instance by style name.

    Raises:
        ValueError: If the style is not supported.
    """
    return ScenarioExporter(ExportStyle.parse(style_name), title=title)


__all__ = [
    "DEFAULT_TITLE",
    "ExportStyle",
    "Formatter",
    "MarkdownFormatter",
    "PlainFormatter",
    "ScenarioAnalysis",
    "ScenarioExporter",
    "analyze_scenario",
    "compute_indegree",
    "generate_scenario_text",
    "get_exporter",
    "get_formatter",
    "is_merge",
    "render_scenario",
    "select_start_nodes",
]
