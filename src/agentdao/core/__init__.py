"""AgentDAO Core - Models, rules and shared primitives for the agent economy."""

from .exceptions import (
    AgentDAOException,
    ConfigException,
    ConflictError,
    InvalidStateError,
    MembershipError,
    NotFoundError,
    UnauthorizedError,
    ValidationException,
)
from .logging import ToolCallLogger, configure_logging, get_logger, tool_logger
from .models import (
    Agent,
    AgentStatus,
    Attestation,
    Beneficiary,
    Capability,
    Collaboration,
    CollaborationStatus,
    Escrow,
    EscrowStatus,
    Message,
    MessageStatus,
    Proposal,
    ProposalAction,
    ProposalStatus,
    ReleaseCondition,
    Reputation,
    StepStatus,
    Submission,
    SubmissionStatus,
    Task,
    TaskStatus,
    Vote,
    WorkflowStep,
)
from .responses import (
    ToolContext,
    error_response,
    exception_response,
    success_response,
)

__all__ = [
    # Exceptions
    "AgentDAOException",
    "ConfigException",
    "ConflictError",
    "InvalidStateError",
    "MembershipError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationException",
    # Logging
    "ToolCallLogger",
    "configure_logging",
    "get_logger",
    "tool_logger",
    # Models
    "Agent",
    "AgentStatus",
    "Attestation",
    "Beneficiary",
    "Capability",
    "Collaboration",
    "CollaborationStatus",
    "Escrow",
    "EscrowStatus",
    "Message",
    "MessageStatus",
    "Proposal",
    "ProposalAction",
    "ProposalStatus",
    "ReleaseCondition",
    "Reputation",
    "StepStatus",
    "Submission",
    "SubmissionStatus",
    "Task",
    "TaskStatus",
    "Vote",
    "WorkflowStep",
    # Responses
    "ToolContext",
    "error_response",
    "exception_response",
    "success_response",
]
