import json
import logging
import threading
import time
from pathlib import Path
from typing import Dict, Any, Optional, Union

from adviser.contracts.agent_outcome import AgentFailure, AgentOutcome, AgentSuccess, FailureKind
from adviser.contracts.analysis_result import AnalysisPayload
from adviser.infrastructure.llm.backends.base import LLMBackend
from adviser.infrastructure.llm.config import load_models_config, get_active_model_profile
from adviser.infrastructure.llm.types import LLMMetadata

logger = logging.getLogger(__name__)

# how often a pending call checks for cancellation
POLL_INTERVAL_SECONDS = 0.1


def build_user_prompt(context: str) -> str:
    return f"<context>\n{context}\n</context>"


class _BackgroundCall:
    """
    Runs one backend call on a daemon thread so the caller can stop
    waiting on timeout or cancellation. An abandoned call never gets
    its result delivered anywhere.
    """

    def __init__(self, fn):
        self._fn = fn
        self.done = threading.Event()
        self.result: Optional[str] = None
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, name="adviser-agent-call", daemon=True)

    def _run(self):
        try:
            self.result = self._fn()
        except Exception as e:
            self.error = e
        finally:
            self.done.set()

    def start(self):
        self._thread.start()


class LLMAdapter:
    """
    Infrastructure-level agent adapter.

    Responsibilities:
    - select backend from the active model profile
    - lazy backend initialization
    - turn every backend answer into a closed AgentOutcome
    """

    def __init__(self, profile: Dict[str, Any], backend: Optional[LLMBackend] = None):
        logger.debug("LLMAdapter created (lazy init, no backend loaded)")

        self.profile = profile
        self._backend: Optional[LLMBackend] = backend  # lazy-loaded

    @classmethod
    def from_config(
        cls,
        models_config_path: Union[str, Path],
        active_profile: Optional[str] = None,
    ) -> "LLMAdapter":
        models_config = load_models_config(models_config_path)
        return cls(get_active_model_profile(models_config, active_profile))

    def _init_backend(self):
        if self._backend is not None:
            return

        backend_type = self.profile.get("backend")
        logger.debug("Initializing %s backend for profile %s", backend_type, self.profile.get("profile_name"))

        if backend_type == "ollama":
            from adviser.infrastructure.llm.backends.ollama import OllamaBackend

            self._backend = OllamaBackend(self.profile)
        elif backend_type == "llama_cpp":
            from adviser.infrastructure.llm.backends.llama_cpp import LlamaCppBackend

            self._backend = LlamaCppBackend(self.profile)
        else:
            raise ValueError(f"Unsupported backend: {backend_type}")

    def analyze(
        self,
        system_prompt: str,
        context: str,
        timeout_seconds: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> AgentOutcome:
        """
        Ask the agent for a structured analysis of `context`.

        Never raises for agent-side problems; they come back as
        AgentFailure so the caller handles one closed set of outcomes.
        """
        try:
            self._init_backend()
        except (ValueError, ImportError) as e:
            return AgentFailure(FailureKind.BACKEND_ERROR, f"Backend init failed: {e}")

        prompt = build_user_prompt(context)
        schema = AnalysisPayload.model_json_schema()
        params: Dict[str, Any] = self.profile.get("params", {})

        call = _BackgroundCall(lambda: self._backend.generate(system_prompt, prompt, schema, params))
        started = time.monotonic()
        deadline = started + timeout_seconds
        call.start()

        while not call.done.is_set():
            if cancel_event is not None and cancel_event.is_set():
                return AgentFailure(FailureKind.CANCELLED, "Operation was cancelled")

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return AgentFailure(FailureKind.TIMEOUT, f"Timed out after {timeout_seconds}s")

            call.done.wait(min(POLL_INTERVAL_SECONDS, remaining))

        duration = time.monotonic() - started

        if call.error is not None:
            return AgentFailure(FailureKind.BACKEND_ERROR, f"Agent error: {call.error}")

        text = (call.result or "").strip()
        if not text:
            return AgentFailure(FailureKind.EMPTY_RESULT, "No result received from agent")

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            return AgentFailure(
                FailureKind.MALFORMED_OUTPUT,
                f"Could not decode structured output: {e}",
            )

        logger.info("Agent answered in %.1fs", duration)
        return AgentSuccess(payload=payload, meta=dict(self.meta), duration_seconds=duration)

    @property
    def meta(self) -> LLMMetadata:
        """
        Unified backend metadata.
        """
        self._init_backend()
        return self._backend.meta
