"""Output styles for the scenario export.

A formatter turns export events (a node, a branch option, a jump...) into
output lines. Formatters hold no traversal state; the engine decides what
to emit and the formatter only decides how it looks.

Two styles are provided:

- ``plain``: bracketed section titles, dashed node separators and
  ``Key: value`` fields, suitable for pasting into a text document.
- ``structured``: Markdown headings, bold field names and blockquoted
  jump markers.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

from arkham.scenario.models import BranchNode, ElementNode, EventNode, PlainNode, VariableNode
from arkham.scenario.text import stringify_value, substitute_variables

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arkham.scenario.models import AnyNode, Variable

DEFAULT_TITLE = "Scenario Export"
GENERATOR = "ARKHAM"
RULE_WIDTH = 40


class ExportStyle(StrEnum):
    """Output style of a scenario export."""

    PLAIN = "plain"
    STRUCTURED = "structured"

    @classmethod
    def parse(cls, name: str) -> ExportStyle:
        """Resolve a style name, accepting ``text`` and ``markdown`` aliases.

        Raises:
            ValueError: If the name is not a known style or alias.
        """
        key = name.strip().lower()
        style = _STYLE_ALIASES.get(key)
        if style is None:
            supported = ", ".join(sorted(_STYLE_ALIASES))
            msg = f"Unknown export style '{name}'. Supported: {supported}"
            raise ValueError(msg)
        return style


_STYLE_ALIASES: dict[str, ExportStyle] = {
    "plain": ExportStyle.PLAIN,
    "text": ExportStyle.PLAIN,
    "structured": ExportStyle.STRUCTURED,
    "markdown": ExportStyle.STRUCTURED,
    "md": ExportStyle.STRUCTURED,
}


def node_fields(node: AnyNode, variables: Mapping[str, Variable]) -> list[tuple[str, str]]:
    """Type-specific fields of a node as ``(field, value)`` pairs.

    Field names are style-neutral keys; each formatter maps them to its own
    display labels. Free text is passed through variable substitution.
    """
    if isinstance(node, ElementNode):
        data = node.data
        fields = [
            ("info_type", data.info_type or ""),
            ("info_value", substitute_variables(data.info_value, variables)),
        ]
        if data.quantity is not None:
            quantity = -data.quantity if data.action_type == "consume" else data.quantity
            fields.append(("quantity", stringify_value(quantity)))
        return fields
    if isinstance(node, BranchNode):
        data = node.data
        fields = [("branch_type", data.branch_type)]
        if data.branch_type == "switch":
            fields.append(("target", data.condition_value or data.condition_variable or ""))
        else:
            fields.append(("condition", substitute_variables(data.condition_value, variables)))
        return fields
    if isinstance(node, VariableNode):
        data = node.data
        value = substitute_variables(data.variable_value, variables)
        return [("assignment", f"{data.target_variable or ''} = {value}")]
    if isinstance(node, EventNode | PlainNode):
        return []
    msg = f"Unhandled node class {type(node).__name__}"
    raise TypeError(msg)


class Formatter:
    """Base class for export styles.

    Subclasses set ``style`` and ``field_labels`` and implement the
    rendering hooks. Every hook returns a list of output lines.
    """

    style: ClassVar[ExportStyle]
    field_labels: ClassVar[dict[str, str]]
    disconnected_title: ClassVar[str]

    def __init__(self, *, title: str = DEFAULT_TITLE) -> None:
        self.title = title

    def header(self) -> list[str]:
        raise NotImplementedError

    def section(self, title: str) -> list[str]:
        raise NotImplementedError

    def section_break(self) -> list[str]:
        raise NotImplementedError

    def node(self, node: AnyNode, variables: Mapping[str, Variable]) -> list[str]:
        raise NotImplementedError

    def option(self, case_label: str, target_label: str) -> list[str]:
        raise NotImplementedError

    def path(self, case_label: str, target_label: str) -> list[str]:
        raise NotImplementedError

    def jump(self, target_label: str, *, loop: bool = False) -> list[str]:
        raise NotImplementedError

    def end_of_path(self) -> list[str]:
        raise NotImplementedError


class PlainFormatter(Formatter):
    """Plain text style."""

    style = ExportStyle.PLAIN
    field_labels: ClassVar[dict[str, str]] = {
        "info_type": "Type",
        "info_value": "Value",
        "quantity": "Quantity",
        "branch_type": "Branch Type",
        "target": "Target",
        "condition": "Condition",
        "assignment": "Set Variable",
    }
    disconnected_title = "DISCONNECTED NODES / REMARKS"

    def header(self) -> list[str]:
        return [self.title.upper(), f"Generated by {GENERATOR}", "=" * RULE_WIDTH, ""]

    def section(self, title: str) -> list[str]:
        return [f"[{title}]"]

    def section_break(self) -> list[str]:
        return ["", "=" * RULE_WIDTH, ""]

    def node(self, node: AnyNode, variables: Mapping[str, Variable]) -> list[str]:
        label = substitute_variables(node.data.label, variables)
        description = substitute_variables(node.data.description, variables)
        lines = ["-" * RULE_WIDTH, f"Node: {label} [{node.type}]"]
        if description:
            lines.append(f"Description: {description}")
        for key, value in node_fields(node, variables):
            lines.append(f"{self.field_labels[key]}: {value}")
        lines.append("")
        return lines

    def option(self, case_label: str, target_label: str) -> list[str]:
        return [f"[{case_label}] -> {target_label}"]

    def path(self, case_label: str, target_label: str) -> list[str]:
        return [f"--- Path: {case_label} (-> {target_label}) ---"]

    def jump(self, target_label: str, *, loop: bool = False) -> list[str]:
        suffix = " (Loop)" if loop else ""
        return [f"-> Jump to: {target_label}{suffix}", ""]

    def end_of_path(self) -> list[str]:
        return ["(End of path)", ""]


class MarkdownFormatter(Formatter):
    """Markdown style: ``#`` title, ``##`` sections, ``###`` nodes, ``####`` paths."""

    style = ExportStyle.STRUCTURED
    field_labels: ClassVar[dict[str, str]] = {
        "info_type": "Type",
        "info_value": "Value",
        "quantity": "Quantity",
        "branch_type": "Type",
        "target": "Target",
        "condition": "Condition",
        "assignment": "Set",
    }
    disconnected_title = "Disconnected Nodes / Remarks"

    def header(self) -> list[str]:
        return [f"# {self.title}", f"*Generated by {GENERATOR}*", ""]

    def section(self, title: str) -> list[str]:
        return [f"## {title}"]

    def section_break(self) -> list[str]:
        return ["", "---", ""]

    def node(self, node: AnyNode, variables: Mapping[str, Variable]) -> list[str]:
        label = substitute_variables(node.data.label, variables)
        description = substitute_variables(node.data.description, variables)
        lines = [f"### {label} ({node.type})"]
        if description:
            lines.append(description)
        for key, value in node_fields(node, variables):
            lines.append(f"- **{self.field_labels[key]}:** {value}")
        lines.append("")
        return lines

    def option(self, case_label: str, target_label: str) -> list[str]:
        return [f"- **{case_label}** -> {target_label}"]

    def path(self, case_label: str, target_label: str) -> list[str]:
        return [f"#### Path: {case_label} (-> {target_label})"]

    def jump(self, target_label: str, *, loop: bool = False) -> list[str]:
        suffix = " (Loop)" if loop else ""
        return [f"> **Jump to:** {target_label}{suffix}", ""]

    def end_of_path(self) -> list[str]:
        return ["> *(End of path)*", ""]


_FORMATTERS: dict[ExportStyle, type[Formatter]] = {
    ExportStyle.PLAIN: PlainFormatter,
    ExportStyle.STRUCTURED: MarkdownFormatter,
}


def get_formatter(style: ExportStyle | str, *, title: str = DEFAULT_TITLE) -> Formatter:
    """Get a formatter instance for a style or style name.

    Raises:
        ValueError: If the style name is not supported.
    """
    resolved = style if isinstance(style, ExportStyle) else ExportStyle.parse(style)
    return _FORMATTERS[resolved](title=title)
