from typing import TypedDict, Literal, Optional


class LLMMetadata(TypedDict):
    """
    Canonical metadata for any agent backend.
    Recorded with every agent outcome.
    """

    backend: Literal["ollama", "llama_cpp"]
    model: str                  # model id / name
    profile: str                # profile key from models.yaml

    context_size: Optional[int]

    supports_structured_output: bool
