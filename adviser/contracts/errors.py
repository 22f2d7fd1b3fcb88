from pathlib import Path
from typing import Optional

from adviser.contracts.agent_outcome import FailureKind


class AdviserError(Exception):
    """
    Base for every failure surfaced to the caller.
    `stage` names the pipeline stage that failed.
    """

    stage = "adviser"


class InputError(AdviserError):
    stage = "input"


class ConfigError(AdviserError):
    stage = "configuration"


class ModelConfigError(ConfigError):
    pass


class AgentError(AdviserError):
    stage = "agent"

    def __init__(self, kind: FailureKind, detail: str):
        super().__init__(f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail


class ValidationError(AdviserError):
    stage = "validation"

    def __init__(self, field: str, constraint: str):
        super().__init__(f"field '{field}': {constraint}")
        self.field = field
        self.constraint = constraint


class PathResolutionError(AdviserError):
    stage = "path resolution"

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        super().__init__(f"cannot check {path}: {cause}")
        self.path = path
        self.cause = cause


class OutputWriteError(AdviserError):
    stage = "write"

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        super().__init__(f"failed to write {path}: {cause}")
        self.path = path
        self.cause = cause
