import json

from adviser.contracts.analysis_result import AnalysisResult
from adviser.core.rendering.base import Renderer
from adviser.core.verdict import VerdictSummary


class StructuredRenderer(Renderer):
    """
    Pretty-printed JSON of the full validated result.
    Parses back losslessly with `validation.load_result`.
    """

    def render(self, result: AnalysisResult, verdict: VerdictSummary) -> str:
        return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
