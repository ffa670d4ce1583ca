"""Response envelopes and the per-call tool context."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from .exceptions import AgentDAOException


@dataclass
class ToolContext:
    """Per-request context passed to every tool handler."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))

    def meta(self) -> dict[str, Any]:
        return {"request_id": self.request_id, "timestamp": self.timestamp}


def success_response(data: Any, context: ToolContext, **extra: Any) -> dict[str, Any]:
    """Build a success envelope.

    Extra keyword arguments (e.g. ``pagination``) become top-level keys.
    """
    response: dict[str, Any] = {"success": True, "data": data}
    response.update(extra)
    response["meta"] = context.meta()
    return response


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build an error envelope."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def exception_response(exc: AgentDAOException) -> dict[str, Any]:
    """Build an error envelope from a domain exception."""
    return {"success": False, "error": exc.to_dict()}
