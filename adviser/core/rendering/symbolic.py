"""
Symbolic notation renderer (AISP-style annotated record).

The output uses its own token syntax. Text fields are embedded between
double quotes with quotes and backslashes escaped and line breaks
collapsed to spaces; this is NOT JSON string escaping.
"""
import re
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from adviser.contracts.analysis_result import AnalysisResult, Severity, format_instant
from adviser.core.rendering.base import Renderer
from adviser.core.verdict import HIGH_ISSUE_LIMIT, Verdict, VerdictSummary

FORMAT_VERSION = "1.0"
DOCUMENT_ID = "adviser"

DESCRIPTION_MAX_CHARS = 100
RECOMMENDATION_MAX_CHARS = 80
SUGGESTION_MAX_CHARS = DESCRIPTION_MAX_CHARS
CONTINUATION = "..."

# ambiguity tolerance declared in the evidence block
EVIDENCE_DELTA = "0.85"

SEVERITY_TIERS: Dict[Severity, str] = {
    Severity.CRITICAL: "⊘",
    Severity.HIGH: "◊⁻",
    Severity.MEDIUM: "◊",
    Severity.LOW: "◊⁺",
}

VERDICT_TIERS: Dict[Verdict, str] = {
    Verdict.APPROVE: "◊⁺",
    Verdict.REVISE: "◊",
    Verdict.REJECT: "⊘",
}

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def truncate(value: str, max_chars: int) -> str:
    if len(value) <= max_chars:
        return value
    return value[:max_chars] + CONTINUATION


def embed_text(value: str, max_chars: Optional[int] = None) -> str:
    """
    Single escape path for every text field placed in the document.

    Truncation counts characters of the flattened, unescaped text so
    the budget is independent of how many quotes the text contains.
    """
    flat = _LINE_BREAKS.sub(" ", value)
    if max_chars is not None:
        flat = truncate(flat, max_chars)
    escaped = flat.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class SymbolicDocumentBuilder:
    """
    Accumulates header lines and labeled blocks, then joins them.
    """

    def __init__(self):
        self._sections: List[str] = []

    def header(self, *lines: str) -> "SymbolicDocumentBuilder":
        self._sections.append("\n".join(lines))
        return self

    def block(
        self,
        title: str,
        label: str,
        lines: List[str],
        brackets: str = "{}",
    ) -> "SymbolicDocumentBuilder":
        opening, closing = brackets[0], brackets[1]
        body = [f"  {line}" if line else "" for line in lines]
        self._sections.append(
            "\n".join([f";; ─── {title} ───", f"⟦{label}⟧{opening}", *body, closing])
        )
        return self

    def evidence(self, lines: List[str]) -> "SymbolicDocumentBuilder":
        body = [f"  {line}" for line in lines]
        self._sections.append("\n".join([";; ─── Ε: EVIDENCE ───", "⟦Ε⟧⟨", *body, "⟩"]))
        return self

    def build(self) -> str:
        return "\n\n".join(self._sections) + "\n"


class SymbolicRenderer(Renderer):
    def __init__(self, today: Optional[date] = None):
        # fixed date for reproducible output; defaults to the current UTC day
        self.today = today

    def _today(self) -> str:
        day = self.today or datetime.now(timezone.utc).date()
        return day.isoformat()

    def render(self, result: AnalysisResult, verdict: VerdictSummary) -> str:
        counts = verdict.severity_counts

        builder = SymbolicDocumentBuilder()

        builder.header(
            f"𝔸{FORMAT_VERSION}.{DOCUMENT_ID}@{self._today()}",
            "γ≔dynamic.analysis",
            "ρ≔⟨analysis,issues,suggestions⟩",
            "⊢ND∧review.complete",
        )

        builder.block("Ω: META", "Ω:Meta", [
            "∀D: Ambig(D) < 0.02",
            "⊢ review.complete",
            f"timestamp≜{embed_text(format_instant(result.timestamp))}",
        ])

        severities = ",".join(s.value for s in Severity)
        verdicts = ", ".join(v.value for v in Verdict)
        tally = ", ".join(f"{s.value}: {counts.get(s, 0)}" for s in Severity)
        builder.block("Σ: TYPES", "Σ:Types", [
            f"Issue ≜ ⟨severity: {{{severities}}}, desc: 𝕊, loc?: 𝕊, rec?: 𝕊⟩",
            f"Verdict ≜ {{{verdicts}}}",
            f"Counts ≜ ⟨{tally}⟩",
        ])

        builder.block("Γ: RULES", "Γ:Rules", [
            f"issues.critical > 0 ⇒ Verdict({Verdict.REJECT.value})",
            f"issues.high > {HIGH_ISSUE_LIMIT} ⇒ Verdict({Verdict.REVISE.value})",
            f"_ ⇒ Verdict({Verdict.APPROVE.value})",
            f"⊢ Verdict({verdict.verdict.value})",
        ])

        builder.block("Λ: ANALYSIS", "Λ:Analysis", self._analysis_lines(result))

        builder.evidence([
            f"δ≜{EVIDENCE_DELTA}",
            f"φ≜{verdict.score}",
            f"τ≜{VERDICT_TIERS[verdict.verdict]}",
            "⊢ND",
            f"⊢Verdict({verdict.verdict.value})",
            f"⊢issues.total={len(result.issues)}",
            f"⊢suggestions.total={len(result.suggestions)}",
        ])

        return builder.build()

    def _analysis_lines(self, result: AnalysisResult) -> List[str]:
        lines = [
            ";; Summary",
            f"summary≜{embed_text(result.summary)}",
            "",
            f";; Issues ({len(result.issues)})",
        ]

        for i, issue in enumerate(result.issues):
            fields = [
                f"τ:{SEVERITY_TIERS[issue.severity]}",
                f"sev:{embed_text(issue.severity.value)}",
                f"desc:{embed_text(issue.description, DESCRIPTION_MAX_CHARS)}",
            ]
            if issue.location:
                fields.append(f"loc:{embed_text(issue.location)}")
            if issue.recommendation:
                fields.append(f"rec:{embed_text(issue.recommendation, RECOMMENDATION_MAX_CHARS)}")
            lines.append(f"issue[{i}]≜⟨{', '.join(fields)}⟩")

        lines.append("")
        lines.append(f";; Suggestions ({len(result.suggestions)})")

        for i, suggestion in enumerate(result.suggestions):
            lines.append(f"suggest[{i}]≜{embed_text(suggestion, SUGGESTION_MAX_CHARS)}")

        return lines
