"""
Validation gate between untrusted agent output and the rest of the core.

Nothing reaches a renderer unless it went through `validate()`.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError as SchemaError

from adviser.contracts.analysis_result import AnalysisPayload, AnalysisResult, Issue
from adviser.contracts.errors import ValidationError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_millis(value: datetime) -> datetime:
    # the serialized instant carries milliseconds only
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def _first_error(exc: SchemaError) -> ValidationError:
    errors = exc.errors()
    if not errors:
        return ValidationError("<root>", str(exc))

    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return ValidationError(loc, first.get("msg", "invalid value"))


def validate(raw: Any, clock: Optional[Clock] = None) -> AnalysisResult:
    """
    Validate an untrusted payload and stamp it.

    Raises ValidationError naming the first offending field.
    The timestamp is always taken at call time, never from `raw`.
    """
    try:
        payload = AnalysisPayload.model_validate(raw)
    except SchemaError as e:
        error = _first_error(e)
        logger.debug("Payload rejected: %s", error)
        raise error from e

    now = _to_millis((clock or _utc_now)())

    return AnalysisResult(
        summary=payload.summary,
        issues=tuple(
            Issue(
                severity=issue.severity,
                description=issue.description,
                location=issue.location,
                recommendation=issue.recommendation,
            )
            for issue in payload.issues
        ),
        suggestions=tuple(payload.suggestions),
        timestamp=now,
    )


def load_result(text: str) -> AnalysisResult:
    """
    Parse a structured (JSON) rendering back into an AnalysisResult,
    keeping its original timestamp.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError("<root>", f"not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError("<root>", "expected a JSON object")

    raw_timestamp = data.get("timestamp")
    if not isinstance(raw_timestamp, str):
        raise ValidationError("timestamp", "Field required")

    try:
        stamped = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError("timestamp", f"not an ISO-8601 instant: {raw_timestamp}") from e

    return validate(data, clock=lambda: stamped)
