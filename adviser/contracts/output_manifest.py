from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List


class OutputMode(str, Enum):
    STRUCTURED = "structured"
    HUMAN = "human"
    SYMBOLIC = "symbolic"

    @classmethod
    def parse(cls, raw: str) -> "OutputMode":
        """
        Accepts the canonical names plus the legacy aliases
        `workflow` (structured) and `aisp` (symbolic).
        """
        value = (raw or "").strip().lower()
        value = MODE_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown output mode '{raw}' (allowed: {allowed})") from None


MODE_ALIASES: Dict[str, str] = {
    "workflow": OutputMode.STRUCTURED.value,
    "aisp": OutputMode.SYMBOLIC.value,
}


@dataclass(frozen=True)
class OutputFormat:
    """
    Per-mode file extension and asset tags.
    """

    extension: str
    asset_type: str
    asset_format: str


OUTPUT_FORMATS: Dict[OutputMode, OutputFormat] = {
    OutputMode.STRUCTURED: OutputFormat(extension="json", asset_type="workflow", asset_format="json"),
    OutputMode.SYMBOLIC: OutputFormat(extension="aisp", asset_type="aisp", asset_format="aisp"),
    OutputMode.HUMAN: OutputFormat(extension="md", asset_type="review", asset_format="md"),
}


@dataclass(frozen=True)
class OutputAsset:
    type: str
    format: str
    path: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "format": self.format, "path": self.path}


@dataclass(frozen=True)
class OutputManifest:
    """
    Record of one successful write. Its presence on disk is the only
    signal that the primary artifact is complete.
    """

    mode: OutputMode
    assets: List[OutputAsset]
    timestamp: str
    status: str = "success"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "mode": self.mode.value,
            "assets": [asset.to_dict() for asset in self.assets],
            "timestamp": self.timestamp,
        }
