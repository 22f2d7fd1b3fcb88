import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol

from adviser.contracts.agent_outcome import AgentFailure, AgentOutcome, FailureKind
from adviser.contracts.analysis_result import AnalysisResult
from adviser.contracts.errors import AgentError
from adviser.contracts.output_manifest import OutputMode
from adviser.core.output.paths import resolve_output_dir
from adviser.core.output.writer import WrittenOutput, handle_output
from adviser.core.rendering.registry import get_renderer
from adviser.core.validation import validate
from adviser.core.verdict import VerdictSummary, derive_verdict

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 1800


class Agent(Protocol):
    def analyze(
        self,
        system_prompt: str,
        context: str,
        timeout_seconds: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> AgentOutcome:
        ...


@dataclass
class AdviseRequest:
    system_prompt: str
    context: str
    mode: OutputMode = OutputMode.SYMBOLIC

    output_file: Optional[Path] = None
    output_dir: Optional[Path] = None

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    cancel_event: Optional[threading.Event] = None


@dataclass(frozen=True)
class AdviseOutcome:
    result: AnalysisResult
    verdict: VerdictSummary
    content: str
    output: WrittenOutput

    @property
    def manifest_path(self) -> Path:
        return self.output.manifest_path


class AdviserRunner:
    """
    Runs one invocation, strictly in order:

    agent -> validate -> verdict -> render -> resolve path -> write -> manifest

    Nothing touches the filesystem until the rendered content exists
    in memory, so a failed or cancelled run leaves no files behind.
    """

    def __init__(
        self,
        agent: Agent,
        output_dir_override: Optional[Path] = None,
        cwd: Optional[Path] = None,
    ):
        self.agent = agent
        self.output_dir_override = output_dir_override
        self.cwd = cwd

    def run(self, request: AdviseRequest) -> AdviseOutcome:
        logger.info("Starting analysis in %s mode", request.mode.value)

        outcome = self.agent.analyze(
            request.system_prompt,
            request.context,
            request.timeout_seconds,
            request.cancel_event,
        )

        if isinstance(outcome, AgentFailure):
            logger.debug("Agent failed: %s", outcome)
            raise AgentError(outcome.kind, outcome.detail)

        return self.process(outcome.payload, request)

    def process(self, payload: Any, request: AdviseRequest) -> AdviseOutcome:
        """
        Core path for an already obtained (untrusted) payload.
        """
        result = validate(payload)
        verdict = derive_verdict(result.issues)
        logger.info(
            "Validated %d issue(s), %d suggestion(s); verdict=%s",
            len(result.issues),
            len(result.suggestions),
            verdict.verdict.value,
        )

        content = get_renderer(request.mode).render(result, verdict)

        base_dir = resolve_output_dir(
            explicit_dir=request.output_dir,
            env_dir=self.output_dir_override,
            cwd=self.cwd,
        )

        if request.cancel_event is not None and request.cancel_event.is_set():
            raise AgentError(FailureKind.CANCELLED, "Operation was cancelled before output was written")

        written = handle_output(content, request.mode, base_dir, request.output_file)

        return AdviseOutcome(result=result, verdict=verdict, content=content, output=written)
