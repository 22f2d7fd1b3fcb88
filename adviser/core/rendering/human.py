from typing import Dict, List

from adviser.contracts.analysis_result import AnalysisResult, Severity, format_instant
from adviser.core.rendering.base import Renderer
from adviser.core.verdict import VerdictSummary

SEVERITY_MARKERS: Dict[Severity, str] = {
    Severity.CRITICAL: "🔴",
    Severity.HIGH: "🟠",
    Severity.MEDIUM: "🟡",
    Severity.LOW: "🟢",
}


class HumanRenderer(Renderer):
    """
    Markdown review. Empty sections are left out entirely.
    """

    title = "Adviser Review"

    def render(self, result: AnalysisResult, verdict: VerdictSummary) -> str:
        parts: List[str] = [
            f"# {self.title}\n\n",
            f"**Date:** {format_instant(result.timestamp)}\n\n",
            f"## Summary\n\n{result.summary}\n\n",
        ]

        if result.issues:
            parts.append(f"## Issues ({len(result.issues)})\n\n")
            for issue in result.issues:
                marker = SEVERITY_MARKERS[issue.severity]
                parts.append(f"### {marker} {issue.severity.value.upper()}\n")
                parts.append(f"{issue.description}\n")
                if issue.location:
                    parts.append(f"**Location:** {issue.location}\n")
                if issue.recommendation:
                    parts.append(f"**Recommendation:** {issue.recommendation}\n")
                parts.append("\n")

        if result.suggestions:
            parts.append("## Suggestions\n\n")
            for suggestion in result.suggestions:
                parts.append(f"- {suggestion}\n")

        return "".join(parts)
