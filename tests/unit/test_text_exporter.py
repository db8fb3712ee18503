"""Tests for writing scenario exports to disk."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from arkham.export import ExportStyle, ScenarioExporter, generate_scenario_text, get_exporter
from tests.fixtures.scenario_fixtures import make_if_else_scenario, make_linear_scenario

if TYPE_CHECKING:
    from pathlib import Path


class TestScenarioExporter:
    def test_plain_file(self, tmp_path: Path) -> None:
        result = ScenarioExporter("plain").export(make_linear_scenario(), tmp_path / "out")

        assert result == tmp_path / "out" / "scenario.txt"
        assert result.read_text(encoding="utf-8") == generate_scenario_text(make_linear_scenario())

    def test_structured_file(self, tmp_path: Path) -> None:
        exporter = ScenarioExporter(ExportStyle.STRUCTURED)
        result = exporter.export(make_if_else_scenario(), tmp_path)

        assert result.name == "scenario.md"
        assert "#### Path: True (-> B)" in result.read_text(encoding="utf-8")

    def test_title_is_used(self, tmp_path: Path) -> None:
        result = ScenarioExporter("text", title="Ghost Ship").export(make_linear_scenario(), tmp_path)
        assert result.read_text(encoding="utf-8").startswith("GHOST SHIP\n")

    def test_format_name(self) -> None:
        assert ScenarioExporter("md").format_name == "structured"

    def test_overwrites_previous_export(self, tmp_path: Path) -> None:
        exporter = ScenarioExporter("plain")
        exporter.export(make_if_else_scenario(), tmp_path)
        result = exporter.export(make_linear_scenario(), tmp_path)

        assert "[True]" not in result.read_text(encoding="utf-8")


class TestGetExporter:
    def test_by_alias(self) -> None:
        assert get_exporter("markdown").style is ExportStyle.STRUCTURED

    def test_unknown_style(self) -> None:
        with pytest.raises(ValueError, match="Unknown export style"):
            get_exporter("pdf")
