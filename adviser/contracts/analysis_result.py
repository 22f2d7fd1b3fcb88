from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# kept verbatim; whitespace-only text is rejected, not stripped
NonBlankText = Annotated[str, Field(min_length=1), AfterValidator(_not_blank)]


class IssuePayload(BaseModel):
    """
    One issue exactly as the agent is asked to emit it.
    """

    model_config = ConfigDict(extra="ignore")

    severity: Severity
    description: NonBlankText
    location: Optional[str] = None
    recommendation: Optional[str] = None


class AnalysisPayload(BaseModel):
    """
    Schema of the agent's structured output.

    Also exported as JSON schema and handed to the backend so the model
    is constrained to this shape.
    """

    model_config = ConfigDict(extra="ignore")

    summary: NonBlankText
    issues: List[IssuePayload]
    suggestions: List[str]


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    description: str
    location: Optional[str] = None
    recommendation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "severity": self.severity.value,
            "description": self.description,
        }
        if self.location is not None:
            data["location"] = self.location
        if self.recommendation is not None:
            data["recommendation"] = self.recommendation
        return data


class AnalysisResult(BaseModel):
    """
    Stable contract for a validated analysis.

    Only ever built by the validator, which owns the timestamp.
    Immutable once constructed.
    """

    model_config = ConfigDict(frozen=True)

    summary: str
    issues: Tuple[Issue, ...]
    suggestions: Tuple[str, ...]
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        # key order is part of the structured output format
        return {
            "summary": self.summary,
            "issues": [issue.to_dict() for issue in self.issues],
            "suggestions": list(self.suggestions),
            "timestamp": format_instant(self.timestamp),
        }


def format_instant(value: datetime) -> str:
    """
    ISO-8601 UTC instant with millisecond precision, e.g.
    2026-01-14T09:30:00.123Z
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
