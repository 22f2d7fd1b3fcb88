from abc import ABC, abstractmethod

from adviser.contracts.analysis_result import AnalysisResult
from adviser.core.verdict import VerdictSummary


class Renderer(ABC):
    """
    Base contract for an output format.

    Input is always a validated result, so implementations
    must not raise on it.
    """

    @abstractmethod
    def render(self, result: AnalysisResult, verdict: VerdictSummary) -> str:
        raise NotImplementedError
