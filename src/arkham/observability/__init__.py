"""Observability module for ARKHAM.

Provides structured logging (structlog routed to a Rich console and an
optional JSONL export trail).
"""

from arkham.observability.logging import (
    bind_scenario,
    close_file_logging,
    configure_logging,
    get_logger,
    trail_path,
)

__all__ = [
    "bind_scenario",
    "close_file_logging",
    "configure_logging",
    "get_logger",
    "trail_path",
]
