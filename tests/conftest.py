"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def clear_style_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's ARKHAM_EXPORT_STYLE from leaking into tests."""
    monkeypatch.delenv("ARKHAM_EXPORT_STYLE", raising=False)


@pytest.fixture(autouse=True)
def clear_log_context() -> Iterator[None]:
    """Drop context bound by one test (e.g. the scenario name) before the next."""
    yield
    structlog.contextvars.clear_contextvars()
