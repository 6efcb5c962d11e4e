"""structlog configuration and fetch observability.

Provides structured log configuration for console and JSON output with
optional file logging, a tool-call logging context manager, and the
``FetchObserver`` collaborator that the fetcher reports upstream
failures to.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from web3_analyst.exceptions import UpstreamError

# ---------------------------------------------------------------------------
# structlog configuration
# ---------------------------------------------------------------------------


_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(
    level: str = "INFO",
    fmt: str = "console",
    log_file: str | Path | None = None,
) -> None:
    """Route structlog through stdlib logging to stderr and ``log_file``.

    stdout is left alone because the stdio MCP transport owns it. ``fmt`` is
    ``"json"`` or ``"console"``; an unknown ``level`` raises ValueError.
    """
    level_upper = level.upper()
    if level_upper not in _VALID_LEVELS:
        msg = f"Invalid log level: {level!r}. Must be one of {sorted(_VALID_LEVELS)}"
        raise ValueError(msg)

    numeric_level = getattr(logging, level_upper)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(str(log_file), encoding="utf-8"))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    # reconfiguring replaces handlers
    root_logger.handlers.clear()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


# ---------------------------------------------------------------------------
# Tool call logging context manager
# ---------------------------------------------------------------------------


@contextmanager
def tool_logging_context(
    tool_name: str,
    **extra: Any,
) -> Iterator[structlog.stdlib.BoundLogger]:
    """Bind ``tool_name`` (and ``extra``) to every log line inside the block.

    Fetch fallbacks logged during the call carry the tool name, and an
    exception escaping the block is logged as ``tool_error`` before it
    propagates.
    """
    structlog.contextvars.bind_contextvars(tool_name=tool_name, **extra)

    log: structlog.stdlib.BoundLogger = structlog.get_logger("tools")
    log.info("tool_start", tool_name=tool_name)

    try:
        yield log
    except Exception:
        log.exception("tool_error", tool_name=tool_name)
        raise
    finally:
        log.info("tool_end", tool_name=tool_name)
        structlog.contextvars.unbind_contextvars("tool_name", *extra.keys())


# ---------------------------------------------------------------------------
# Fetch observer
# ---------------------------------------------------------------------------


class FetchObserver(Protocol):
    """Receives notice of upstream failures the fetcher recovered from."""

    def upstream_failed(
        self, kind: str, args: tuple[Any, ...], error: UpstreamError
    ) -> None: ...


class StructlogFetchObserver:
    """FetchObserver that writes one warning per fallback."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger("fetcher")

    def upstream_failed(
        self, kind: str, args: tuple[Any, ...], error: UpstreamError
    ) -> None:
        self._logger.warning(
            "upstream_fallback",
            kind=kind,
            args=[str(arg) for arg in args],
            provider=error.provider,
            status_code=error.status_code,
            error=error.body[:500],
        )
