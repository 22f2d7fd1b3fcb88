from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from adviser.contracts.agent_outcome import AgentFailure, AgentSuccess, FailureKind
from adviser.contracts.errors import AgentError, ValidationError
from adviser.contracts.output_manifest import OutputMode
from adviser.core.runner import AdviseRequest, AdviserRunner
from adviser.core.verdict import Verdict


class FakeAgent:
    """
    Returns a canned outcome and records what it was asked.
    """

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def analyze(self, system_prompt, context, timeout_seconds, cancel_event=None):
        self.calls.append((system_prompt, context, timeout_seconds, cancel_event))
        return self.outcome


def request(**overrides) -> AdviseRequest:
    fields = dict(system_prompt="Review this.", context="design text", timeout_seconds=5)
    fields.update(overrides)
    return AdviseRequest(**fields)


def all_files(root: Path):
    return [p for p in root.rglob("*") if p.is_file()]


def test_successful_run_writes_artifact_and_manifest(tmp_path: Path, full_payload):
    agent = FakeAgent(AgentSuccess(payload=full_payload))
    runner = AdviserRunner(agent, cwd=tmp_path)

    outcome = runner.run(request(mode=OutputMode.STRUCTURED, output_dir=tmp_path / "out"))

    assert agent.calls[0][:3] == ("Review this.", "design text", 5)
    assert outcome.verdict.verdict is Verdict.REJECT
    assert outcome.output.path.parent == tmp_path / "out"
    assert json.loads(outcome.output.path.read_text(encoding="utf-8"))["summary"] == full_payload["summary"]
    assert outcome.manifest_path.exists()
    assert len(all_files(tmp_path)) == 2


def test_env_override_is_used_when_no_explicit_dir(tmp_path: Path, empty_payload):
    runner = AdviserRunner(
        FakeAgent(AgentSuccess(payload=empty_payload)),
        output_dir_override=tmp_path / "env-out",
        cwd=tmp_path,
    )

    outcome = runner.run(request(mode=OutputMode.HUMAN))

    assert outcome.output.path.parent == tmp_path / "env-out"
    assert outcome.output.path.suffix == ".md"


def test_default_mode_is_symbolic(tmp_path: Path, empty_payload):
    runner = AdviserRunner(FakeAgent(AgentSuccess(payload=empty_payload)), cwd=tmp_path)

    outcome = runner.run(request(output_dir=tmp_path))

    assert outcome.output.path.suffix == ".aisp"
    assert outcome.content.startswith("𝔸1.0.adviser@")


@pytest.mark.parametrize("kind", list(FailureKind))
def test_agent_failure_raises_and_writes_nothing(tmp_path: Path, kind):
    runner = AdviserRunner(FakeAgent(AgentFailure(kind, "boom")), cwd=tmp_path)

    with pytest.raises(AgentError) as exc:
        runner.run(request(output_dir=tmp_path / "out"))

    assert exc.value.kind is kind
    assert exc.value.stage == "agent"
    assert all_files(tmp_path) == []


def test_invalid_payload_writes_nothing(tmp_path: Path):
    bad = {"summary": "s", "issues": [{"severity": "urgent", "description": "d"}], "suggestions": []}
    runner = AdviserRunner(FakeAgent(AgentSuccess(payload=bad)), cwd=tmp_path)

    with pytest.raises(ValidationError) as exc:
        runner.run(request(output_dir=tmp_path / "out"))

    assert exc.value.field == "issues.0.severity"
    assert all_files(tmp_path) == []


def test_cancel_before_write_leaves_no_files(tmp_path: Path, full_payload):
    cancel = threading.Event()
    cancel.set()
    runner = AdviserRunner(FakeAgent(AgentSuccess(payload=full_payload)), cwd=tmp_path)

    with pytest.raises(AgentError) as exc:
        runner.run(request(output_dir=tmp_path / "out", cancel_event=cancel))

    assert exc.value.kind is FailureKind.CANCELLED
    assert all_files(tmp_path) == []


def test_process_accepts_payload_directly(tmp_path: Path, empty_payload):
    runner = AdviserRunner(FakeAgent(None), cwd=tmp_path)

    outcome = runner.process(empty_payload, request(mode=OutputMode.STRUCTURED, output_dir=tmp_path))

    assert outcome.verdict.verdict is Verdict.APPROVE
    assert outcome.verdict.score == 100
