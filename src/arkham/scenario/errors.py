"""Errors raised while reading scenario inputs."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - used at runtime


class ScenarioLoadError(Exception):
    """Raised when a scenario file cannot be read or parsed."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f" at {path}" if path is not None else ""
        super().__init__(f"Failed to load scenario{where}: {reason}")
