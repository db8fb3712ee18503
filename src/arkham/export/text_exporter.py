"""Write scenario exports to disk."""

from __future__ import annotations

from typing import TYPE_CHECKING

from arkham.export.engine import generate_scenario_text
from arkham.export.formatter import DEFAULT_TITLE, ExportStyle
from arkham.observability.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from arkham.scenario.models import ScenarioSnapshot

log = get_logger(__name__)

_FILE_NAMES: dict[ExportStyle, str] = {
    ExportStyle.PLAIN: "scenario.txt",
    ExportStyle.STRUCTURED: "scenario.md",
}


class ScenarioExporter:
    """Export a scenario as a plain text or Markdown file."""

    def __init__(
        self,
        style: ExportStyle | str = ExportStyle.PLAIN,
        *,
        title: str = DEFAULT_TITLE,
    ) -> None:
        self.style = style if isinstance(style, ExportStyle) else ExportStyle.parse(style)
        self.title = title

    @property
    def format_name(self) -> str:
        return str(self.style)

    @property
    def file_name(self) -> str:
        return _FILE_NAMES[self.style]

    def export(self, snapshot: ScenarioSnapshot, output_dir: Path) -> Path:
        """Write the export into ``output_dir``.

        Args:
            snapshot: Scenario to export.
            output_dir: Directory to write into; created if missing.

        Returns:
            Path to the written file.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / self.file_name

        content = generate_scenario_text(snapshot, self.style, title=self.title)
        output_file.write_text(content, encoding="utf-8")

        log.info(
            "scenario_file_written",
            style=self.format_name,
            nodes=len(snapshot.nodes),
            edges=len(snapshot.edges),
            output=str(output_file),
        )
        return output_file
