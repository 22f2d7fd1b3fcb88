from typing import Dict, Type

from adviser.contracts.analysis_result import AnalysisResult
from adviser.contracts.output_manifest import OutputMode
from adviser.core.rendering.base import Renderer
from adviser.core.rendering.human import HumanRenderer
from adviser.core.rendering.structured import StructuredRenderer
from adviser.core.rendering.symbolic import SymbolicRenderer
from adviser.core.verdict import VerdictSummary

RENDERERS: Dict[OutputMode, Type[Renderer]] = {
    OutputMode.STRUCTURED: StructuredRenderer,
    OutputMode.HUMAN: HumanRenderer,
    OutputMode.SYMBOLIC: SymbolicRenderer,
}


def get_renderer(mode: OutputMode) -> Renderer:
    renderer_cls = RENDERERS.get(mode)
    if renderer_cls is None:
        raise ValueError(f"Unsupported output mode: {mode}")
    return renderer_cls()


def render(result: AnalysisResult, verdict: VerdictSummary, mode: OutputMode) -> str:
    return get_renderer(mode).render(result, verdict)
