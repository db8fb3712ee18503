"""Load scenario snapshots from saved editor files.

A saved scenario is a JSON object::

    {
      "nodes": [{"id": ..., "type": ..., "position": {...}, "data": {...}}],
      "edges": [{"id": ..., "source": ..., "target": ..., "sourceHandle": ...}],
      "gameState": {"variables": {"gold": {"name": "gold", "type": "number", "value": 3}}},
      "characters": [...], "resources": [...], "viewport": {...}
    }

Only nodes, edges and variables matter for export; the rest is ignored.
Edges that point at unknown nodes are kept as-is.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from arkham.observability.logging import get_logger
from arkham.scenario.errors import ScenarioLoadError
from arkham.scenario.models import ScenarioSnapshot

if TYPE_CHECKING:
    from pathlib import Path

log = get_logger(__name__)


def load_scenario(path: Path, *, revision: int = 0) -> ScenarioSnapshot:
    """Read a scenario JSON file into a snapshot.

    Args:
        path: Path to the saved scenario.
        revision: Revision number stamped on the snapshot.

    Returns:
        Frozen snapshot of the scenario.

    Raises:
        ScenarioLoadError: If the file is missing, not JSON, or does not
            match the scenario schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ScenarioLoadError(path, e.strerror or str(e)) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(path, f"Invalid JSON: {e.msg} (line {e.lineno})") from e

    snapshot = parse_scenario(data, path=path, revision=revision)
    log.info(
        "scenario_loaded",
        path=str(path),
        nodes=len(snapshot.nodes),
        edges=len(snapshot.edges),
        variables=len(snapshot.variables),
    )
    return snapshot


def parse_scenario(
    data: Any,
    *,
    path: Path | None = None,
    revision: int = 0,
) -> ScenarioSnapshot:
    """Build a snapshot from a decoded scenario document.

    Args:
        data: Decoded JSON document.
        path: Source file, used only in error messages.
        revision: Revision number stamped on the snapshot.

    Returns:
        Frozen snapshot of the scenario.

    Raises:
        ScenarioLoadError: If the document does not match the scenario schema.
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError(path, "Scenario document must be a JSON object")

    game_state = data.get("gameState") or {}
    if not isinstance(game_state, dict):
        raise ScenarioLoadError(path, "gameState must be an object")

    try:
        return ScenarioSnapshot.model_validate(
            {
                "nodes": data.get("nodes") or [],
                "edges": data.get("edges") or [],
                "variables": _normalize_variables(game_state.get("variables") or {}),
                "revision": revision,
            }
        )
    except ValidationError as e:
        raise ScenarioLoadError(path, _summarize_validation_error(e)) from e


def _normalize_variables(raw: Any) -> Any:
    """Fill in each variable's ``name`` from its key when omitted."""
    if not isinstance(raw, dict):
        return raw
    result: dict[str, Any] = {}
    for name, variable in raw.items():
        if isinstance(variable, dict):
            result[name] = {"name": name, **variable}
        else:
            result[name] = variable
    return result


def _summarize_validation_error(error: ValidationError) -> str:
    """Condense a pydantic error into one line per problem (first five)."""
    problems = []
    for item in error.errors()[:5]:
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}")
    remaining = error.error_count() - len(problems)
    if remaining > 0:
        problems.append(f"... and {remaining} more")
    return "; ".join(problems)
