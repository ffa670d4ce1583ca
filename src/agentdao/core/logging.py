"""Logging setup for AgentDAO.

The MCP server talks JSON-RPC over stdout, so all log output goes to stderr.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from collections.abc import Iterator
from typing import Any

from . import defaults

_ROOT_LOGGER = "agentdao"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``agentdao`` namespace."""
    if name == _ROOT_LOGGER or name.startswith(f"{_ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


def configure_logging(
    level: int | str | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """Configure the ``agentdao`` logger.

    Args:
        level: Log level (default: ``AGENTDAO_LOG_LEVEL`` or INFO)
        handler: Custom handler (default: StreamHandler to stderr)
        format_string: Custom format string

    Returns:
        The configured root ``agentdao`` logger
    """
    if level is None:
        level = defaults.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))

    # Replace handlers we installed earlier so repeated calls don't duplicate output
    for existing in list(logger.handlers):
        if getattr(existing, "_agentdao_handler", False):
            logger.removeHandler(existing)
    handler._agentdao_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False

    return logger


class ToolCallLogger:
    """Logs tool invocations with outcome and duration."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_logger("tools")

    @contextmanager
    def track(self, tool_name: str, request_id: str) -> Iterator[dict[str, Any]]:
        """Track a single tool call.

        The caller stores the response envelope under ``"result"`` in the
        yielded dict so the outcome can be logged.
        """
        record: dict[str, Any] = {}
        start = time.perf_counter()
        self.logger.debug("tool %s started (request %s)", tool_name, request_id)
        try:
            yield record
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.logger.error("tool %s raised after %.1fms (request %s)", tool_name, elapsed_ms, request_id)
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        result = record.get("result") or {}
        if result.get("success"):
            self.logger.info("tool %s ok in %.1fms (request %s)", tool_name, elapsed_ms, request_id)
        else:
            code = (result.get("error") or {}).get("code", "UNKNOWN")
            self.logger.warning("tool %s failed with %s in %.1fms (request %s)", tool_name, code, elapsed_ms, request_id)


tool_logger = ToolCallLogger()
