from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable

from adviser.contracts.analysis_result import Issue, Severity


class Verdict(str, Enum):
    APPROVE = "approve"
    REVISE = "revise"
    REJECT = "reject"


# more than this many high-severity issues forces a revision
HIGH_ISSUE_LIMIT = 2


@dataclass(frozen=True)
class VerdictSummary:
    verdict: Verdict
    severity_counts: Dict[Severity, int]

    @property
    def score(self) -> int:
        return confidence_score(self.severity_counts)

    def count(self, severity: Severity) -> int:
        return self.severity_counts.get(severity, 0)


def count_severities(issues: Iterable[Issue]) -> Dict[Severity, int]:
    counts = {severity: 0 for severity in Severity}
    for issue in issues:
        counts[issue.severity] += 1
    return counts


def derive_verdict(issues: Iterable[Issue]) -> VerdictSummary:
    """
    Priority cascade, first matching rule wins:

    1. any critical issue          -> reject
    2. more than two high issues   -> revise
    3. otherwise                   -> approve
    """
    counts = count_severities(issues)

    if counts[Severity.CRITICAL] > 0:
        verdict = Verdict.REJECT
    elif counts[Severity.HIGH] > HIGH_ISSUE_LIMIT:
        verdict = Verdict.REVISE
    else:
        verdict = Verdict.APPROVE

    return VerdictSummary(verdict=verdict, severity_counts=counts)


def confidence_score(counts: Dict[Severity, int]) -> int:
    # Unclamped: enough critical issues drive this below zero.
    return 100 - 20 * counts.get(Severity.CRITICAL, 0) - 10 * counts.get(Severity.HIGH, 0)
