"""Scenario graph models.

A scenario is a directed graph of typed nodes joined by edges, plus the
variables the scenario text can reference. The node payload is a tagged
union keyed on ``type``: each node class carries only the fields its type
uses. Field aliases follow the camelCase keys of saved scenario files.

All models are frozen. A :class:`ScenarioSnapshot` is captured once and
passed by value to the export engine, which never mutates it.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

NodeType = Literal[
    "event",
    "element",
    "branch",
    "group",
    "memo",
    "variable",
    "jump",
    "sticky",
    "character",
    "resource",
]

VariableType = Literal["boolean", "number", "string"]
VariableValue = bool | int | float | str | None


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Position(_Frozen):
    """Canvas position of a node."""

    x: float = 0
    y: float = 0


class BranchCase(_Frozen):
    """One named case of a switch branch."""

    id: str
    label: str = ""


class NodeData(_Frozen):
    """Fields shared by every node type.

    Editor-only keys (``revealed``, ``expanded``, ``contentWidth``...) are
    dropped on load.
    """

    label: str = ""
    description: str | None = None


class EventData(NodeData):
    is_start: bool = Field(default=False, alias="isStart")


class ElementData(NodeData):
    info_type: Literal["knowledge", "item", "skill", "stat"] | None = Field(
        default=None, alias="infoType"
    )
    info_value: str | None = Field(default=None, alias="infoValue")
    quantity: int | float | None = None
    action_type: Literal["obtain", "consume"] | None = Field(default=None, alias="actionType")

    @field_validator("quantity", mode="before")
    @classmethod
    def blank_quantity_is_unset(cls, v: Any) -> Any:
        """A cleared number input is saved as an empty string."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BranchData(NodeData):
    branch_type: Literal["if_else", "switch"] = Field(default="if_else", alias="branchType")
    branches: tuple[BranchCase, ...] = ()
    condition_variable: str | None = Field(default=None, alias="conditionVariable")
    condition_value: str | None = Field(default=None, alias="conditionValue")


class VariableData(NodeData):
    target_variable: str | None = Field(default=None, alias="targetVariable")
    variable_value: str | None = Field(default=None, alias="variableValue")


class _BaseNode(_Frozen):
    id: str = Field(min_length=1)
    position: Position = Field(default_factory=Position)

    @property
    def is_start(self) -> bool:
        """Whether the author flagged this node as a story start."""
        return False


class EventNode(_BaseNode):
    """A story beat; may be flagged as the start of the story."""

    type: Literal["event"] = "event"
    data: EventData = Field(default_factory=EventData)

    @property
    def is_start(self) -> bool:
        return self.data.is_start


class ElementNode(_BaseNode):
    """Gaining or spending an item, skill, stat or piece of knowledge.

    ``information`` is the pre-rename type name and is still accepted.
    """

    type: Literal["element", "information"] = "element"
    data: ElementData = Field(default_factory=ElementData)


class BranchNode(_BaseNode):
    """A decision point whose outgoing edges are mutually exclusive options."""

    type: Literal["branch"] = "branch"
    data: BranchData = Field(default_factory=BranchData)


class VariableNode(_BaseNode):
    """Assignment of a value to a scenario variable."""

    type: Literal["variable"] = "variable"
    data: VariableData = Field(default_factory=VariableData)


class PlainNode(_BaseNode):
    """Any node type without type-specific fields."""

    type: Literal["group", "memo", "jump", "sticky", "character", "resource"]
    data: NodeData = Field(default_factory=NodeData)


AnyNode = EventNode | ElementNode | BranchNode | VariableNode | PlainNode
ScenarioNode = Annotated[AnyNode, Field(discriminator="type")]


class Edge(_Frozen):
    """A directed link between two nodes.

    ``source_handle`` names the outgoing port of a branch node: ``"true"`` or
    ``"false"`` for if/else branches, a case id for switch branches.
    """

    id: str = ""
    source: str
    target: str
    source_handle: str | None = Field(default=None, alias="sourceHandle")


class Variable(_Frozen):
    """A named scenario variable and its current value."""

    name: str
    type: VariableType = "string"
    value: VariableValue = None


class ScenarioSnapshot(_Frozen):
    """Immutable view of a scenario at one point in time.

    Attributes:
        nodes: Nodes in authoring order.
        edges: Edges in authoring order; order decides branch option order.
        variables: Variables keyed by name, as a read-only mapping.
        revision: Caller-assigned version of the snapshot.
    """

    nodes: tuple[ScenarioNode, ...] = ()
    edges: tuple[Edge, ...] = ()
    variables: Mapping[str, Variable] = Field(default_factory=dict, validate_default=True)
    revision: int = 0

    @field_validator("variables", mode="after")
    @classmethod
    def freeze_variables(cls, v: Mapping[str, Variable]) -> Mapping[str, Variable]:
        return MappingProxyType(dict(v))
