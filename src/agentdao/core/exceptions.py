"""AgentDAO exception hierarchy.

Every domain failure is an ``AgentDAOException`` carrying a stable error
``code``. Tool dispatch converts them into ``{"success": False, "error": ...}``
envelopes; nothing in this module crosses the tool boundary as an exception.
"""

from __future__ import annotations

from typing import Any


class AgentDAOException(Exception):
    """Base exception for all AgentDAO domain errors."""

    default_code = "AGENTDAO_ERROR"

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.code = code or self.default_code
        self.message = message
        self.details = details
        super().__init__(f"[{self.code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the error block of a response envelope."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return error


class NotFoundError(AgentDAOException):
    """Raised when an entity lookup misses."""

    default_code = "NOT_FOUND"


class UnauthorizedError(AgentDAOException):
    """Raised when the caller does not match the stored owner of an entity."""

    default_code = "UNAUTHORIZED"


class InvalidStateError(AgentDAOException):
    """Raised when a state machine precondition fails."""

    default_code = "INVALID_STATUS"


class ConflictError(AgentDAOException):
    """Raised on uniqueness violations (double vote, duplicate assignment)."""

    default_code = "CONFLICT"


class MembershipError(AgentDAOException):
    """Raised when an agent is not a member of the collaboration it acts on."""

    default_code = "NOT_PARTICIPANT"


class ValidationException(AgentDAOException):
    """Raised when tool input is malformed."""

    default_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, code: str | None = None) -> None:
        self.field = field
        super().__init__(message, code=code, details={"field": field} if field else None)


class ConfigException(AgentDAOException):
    """Raised when server configuration is invalid."""

    default_code = "CONFIG_ERROR"
