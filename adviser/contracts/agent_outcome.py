from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    BACKEND_ERROR = "backend_error"
    MALFORMED_OUTPUT = "malformed_output"
    EMPTY_RESULT = "empty_result"


@dataclass(frozen=True)
class AgentSuccess:
    """
    Agent answered with something that decoded as structured output.
    The payload is still untrusted until it passes validation.
    """

    payload: Any
    meta: Dict[str, Any] = field(default_factory=dict)
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class AgentFailure:
    kind: FailureKind
    detail: str


AgentOutcome = Union[AgentSuccess, AgentFailure]
