"""Export configuration loading.

Settings live under the ``export:`` key of an ``arkham.yaml`` file::

    export:
      style: structured
      title: The Haunted Manor
      output_dir: build/export

Resolution order for the style: CLI flag, then ``ARKHAM_EXPORT_STYLE``,
then the config file, then the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from arkham.export.formatter import DEFAULT_TITLE, ExportStyle

CONFIG_FILE_NAME = "arkham.yaml"
DEFAULT_OUTPUT_DIR = "export"
STYLE_ENV_VAR = "ARKHAM_EXPORT_STYLE"


@dataclass
class ExportConfig:
    """Settings for the ``export`` command."""

    style: ExportStyle = ExportStyle.PLAIN
    title: str = DEFAULT_TITLE
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)

    def resolve_style(self, override: str | None = None) -> ExportStyle:
        """Get the effective style.

        Checks the explicit override, then ARKHAM_EXPORT_STYLE, then config.

        Raises:
            ValueError: If the override or environment names an unknown style.
        """
        name = override or os.getenv(STYLE_ENV_VAR)
        if name:
            return ExportStyle.parse(name)
        return self.style

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExportConfig:
        """Create config from the ``export`` mapping.

        Raises:
            ValueError: If ``style`` is not a known style name.
        """
        style = data.get("style")
        return cls(
            style=ExportStyle.parse(str(style)) if style else ExportStyle.PLAIN,
            title=str(data.get("title") or DEFAULT_TITLE),
            output_dir=Path(data.get("output_dir") or DEFAULT_OUTPUT_DIR),
        )


class ExportConfigError(Exception):
    """Raised when the export configuration cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load export config at {path}: {reason}")


def load_export_config(config_path: Path) -> ExportConfig:
    """Load export settings from a YAML file.

    A missing file yields the defaults.

    Args:
        config_path: Path to ``arkham.yaml``.

    Returns:
        ExportConfig instance.

    Raises:
        ExportConfigError: If the file exists but cannot be parsed.
    """
    if not config_path.exists():
        return ExportConfig()

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)

        if data is None:
            return ExportConfig()
        if not isinstance(data, dict):
            raise ExportConfigError(config_path, "Top level must be a mapping")

        export_data = data.get("export") or {}
        if not isinstance(export_data, dict):
            raise ExportConfigError(config_path, "'export' must be a mapping")

        return ExportConfig.from_dict(dict(export_data))
    except Exception as e:
        if isinstance(e, ExportConfigError):
            raise
        raise ExportConfigError(config_path, str(e)) from e
