from __future__ import annotations

from datetime import datetime, timezone

import pytest

from adviser.core.validation import validate

FIXED_NOW = datetime(2026, 1, 14, 9, 30, 0, 123000, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def full_payload() -> dict:
    return {
        "summary": "The design splits ingestion and storage cleanly.",
        "issues": [
            {
                "severity": "critical",
                "description": "No retry policy for the upstream queue.",
                "location": "design.md:42",
                "recommendation": "Add bounded retries with backoff.",
            },
            {"severity": "high", "description": "Schema migrations are manual."},
            {"severity": "medium", "description": "Metrics naming is inconsistent.", "location": "design.md:88"},
            {"severity": "low", "description": "Typo in the glossary.", "recommendation": "Fix spelling."},
        ],
        "suggestions": ["Add a sequence diagram.", "Document the rollback plan."],
    }


@pytest.fixture
def empty_payload() -> dict:
    return {"summary": "Nothing to report.", "issues": [], "suggestions": []}


@pytest.fixture
def full_result(full_payload):
    return validate(full_payload, clock=fixed_clock)


@pytest.fixture
def empty_result(empty_payload):
    return validate(empty_payload, clock=fixed_clock)
