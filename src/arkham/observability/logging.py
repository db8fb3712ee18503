"""Logging for ARKHAM.

Modules log through structlog (``log = get_logger(__name__)``) with
snake_case event names and keyword context, for example::

    log.info("scenario_loaded", path=str(path), nodes=12, edges=14)

Events go to two sinks:

- the console (stderr, via Rich): WARNING by default, ``-v`` INFO,
  ``-vv`` DEBUG;
- optionally an export trail beside the scenario file
  (``manor.json`` -> ``manor.export.jsonl``) holding every event at DEBUG,
  one JSON object per line::

      {"event": "section_rendered", "root": "n3", "lines": 18,
       "scenario": "manor.json", "level": "debug",
       "logger": "arkham.export.engine", "timestamp": "2026-..."}

Context bound with :func:`bind_scenario` is attached to every event.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import EventDict, Processor, WrappedLogger

TRAIL_SUFFIX = ".export.jsonl"

_configured = False
_file_handler: logging.FileHandler | None = None

_SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]

# Already shown by the Rich handler itself
_CONSOLE_HIDDEN = ("timestamp", "level", "logger")


def _render_console(_logger: WrappedLogger, _name: str, event_dict: EventDict) -> str:
    """Render ``event key=value ...`` for the console."""
    event = str(event_dict.pop("event", ""))
    context = " ".join(
        f"{key}={value}" for key, value in event_dict.items() if key not in _CONSOLE_HIDDEN
    )
    return f"{event} {context}" if context else event


def trail_path(scenario: Path) -> Path:
    """Export trail written next to ``scenario`` when file logging is on."""
    return scenario.with_name(scenario.stem + TRAIL_SUFFIX)


def configure_logging(verbosity: int = 0, trail: Path | None = None) -> None:
    """Configure structlog and its console and file sinks.

    Can be called again; the previous trail is closed first.

    Args:
        verbosity: 0=WARNING (default), 1=INFO, 2+=DEBUG on the console.
        trail: JSONL file to append every event to, or None for console only.
    """
    global _configured, _file_handler

    close_file_logging()

    levels = {0: logging.WARNING, 1: logging.INFO}
    console_level = levels.get(verbosity, logging.DEBUG)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
        rich_tracebacks=True,
        level=console_level,
    )
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _render_console,
            ],
        )
    )
    handlers: list[logging.Handler] = [console_handler]

    if trail is not None:
        trail.parent.mkdir(parents=True, exist_ok=True)
        _file_handler = logging.FileHandler(trail, mode="a", encoding="utf-8")
        _file_handler.setLevel(logging.DEBUG)
        _file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=_SHARED_PROCESSORS,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(default=str),
                ],
            )
        )
        handlers.append(_file_handler)

    root_level = logging.DEBUG if (verbosity > 0 or trail is not None) else logging.WARNING
    logging.basicConfig(level=root_level, handlers=handlers, force=True)

    # rich pulls in markdown-it, which is chatty at DEBUG
    logging.getLogger("markdown_it").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a structured logger, configuring console logging on first use."""
    if not _configured:
        configure_logging()

    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger


def bind_scenario(scenario: Path, **context: Any) -> None:
    """Tag every following event with the scenario file name."""
    structlog.contextvars.bind_contextvars(scenario=scenario.name, **context)


def close_file_logging() -> None:
    """Flush and close the export trail, if one is open."""
    global _file_handler
    if _file_handler is not None:
        logging.getLogger().removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
